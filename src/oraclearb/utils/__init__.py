"""Utility functions for the spread monitor."""

from oraclearb.utils.math import round_profit, scale_mantissa
from oraclearb.utils.time import (
    LatencyTimer,
    format_duration_us,
    format_timestamp_s,
    get_timestamp_ms,
    get_timestamp_s,
)


__all__ = [
    "LatencyTimer",
    "format_duration_us",
    "format_timestamp_s",
    "get_timestamp_ms",
    "get_timestamp_s",
    "round_profit",
    "scale_mantissa",
]
