"""
Clock helpers.

Wall-clock readings serve as stream request ids and for oracle
staleness checks; latency is measured on the monotonic clock.
"""

import time
from datetime import UTC, datetime


def get_timestamp_ms() -> int:
    """
    Get the current Unix time in milliseconds.

    Used as the correlation id of Binance stream requests.
    """
    return time.time_ns() // 1_000_000


def get_timestamp_s() -> int:
    """Get the current Unix time in whole seconds, comparable to oracle publish times."""
    return int(time.time())


def format_timestamp_s(timestamp_s: int) -> str:
    """
    Format a Unix timestamp in seconds as UTC.

    Example:
        >>> format_timestamp_s(1704067200)
        '2024-01-01 00:00:00'
    """
    return datetime.fromtimestamp(timestamp_s, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


class LatencyTimer:
    """
    Context manager measuring elapsed time in microseconds.

    Example:
        >>> with LatencyTimer() as timer:
        ...     detector.detect(snapshot, fee)
        >>> timer.latency_us
        42
    """

    __slots__ = ("_started_ns", "latency_us")

    def __init__(self) -> None:
        self._started_ns = 0
        self.latency_us = 0

    def __enter__(self) -> "LatencyTimer":
        self._started_ns = time.perf_counter_ns()
        return self

    def __exit__(self, *args: object) -> None:
        self.latency_us = (time.perf_counter_ns() - self._started_ns) // 1000


_DURATION_UNITS: tuple[tuple[int, str], ...] = ((1_000_000, "s"), (1000, "ms"))


def format_duration_us(duration_us: int) -> str:
    """
    Format a duration for logs.

    Examples:
        >>> format_duration_us(500)
        '500μs'
        >>> format_duration_us(1500)
        '1.50ms'
        >>> format_duration_us(1500000)
        '1.50s'
    """
    for scale, unit in _DURATION_UNITS:
        if duration_us >= scale:
            return f"{duration_us / scale:.2f}{unit}"
    return f"{duration_us}μs"
