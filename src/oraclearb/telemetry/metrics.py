"""
In-memory metrics for the spread monitor.

Counters for producer activity, bounded latency windows for the oracle
fetch and detection steps, and running totals of reported opportunities.
"""

import time
from collections import Counter, deque
from dataclasses import dataclass
from decimal import Decimal

from oraclearb.config.constants import LATENCY_WINDOW_SIZE
from oraclearb.core.types import ArbitrageDirection, ArbitrageOpportunity


@dataclass(frozen=True)
class LatencyStats:
    """Summary of one latency window, in microseconds."""

    count: int = 0
    min_us: int = 0
    max_us: int = 0
    avg_us: float = 0.0
    p50_us: int = 0
    p99_us: int = 0


class LatencyWindow:
    """Most recent latency samples of one step."""

    __slots__ = ("_samples",)

    def __init__(self, size: int) -> None:
        self._samples: deque[int] = deque(maxlen=size)

    def add(self, latency_us: int) -> None:
        self._samples.append(latency_us)

    def __len__(self) -> int:
        return len(self._samples)

    def summarize(self) -> LatencyStats:
        """Compute order statistics over the current window."""
        if not self._samples:
            return LatencyStats()

        ordered = sorted(self._samples)
        last = len(ordered) - 1
        return LatencyStats(
            count=len(ordered),
            min_us=ordered[0],
            max_us=ordered[-1],
            avg_us=sum(ordered) / len(ordered),
            p50_us=ordered[last // 2],
            p99_us=ordered[round(last * 0.99)],
        )


@dataclass
class OpportunityStats:
    """Running totals of reported opportunities."""

    opportunities_reported: int = 0
    sell_side: int = 0
    buy_side: int = 0
    best_profit: Decimal = Decimal(0)
    total_profit: Decimal = Decimal(0)

    @property
    def avg_profit(self) -> Decimal:
        """Mean estimated profit per reported opportunity."""
        if not self.opportunities_reported:
            return Decimal(0)
        return self.total_profit / self.opportunities_reported


class MetricsCollector:
    """
    Collects monitor metrics.

    Counter names used by the monitor: oracle_updates, oracle_stale,
    oracle_unavailable, ticker_updates, keep_alives. Latency names:
    oracle_fetch, detect.
    """

    def __init__(self, latency_window_size: int = LATENCY_WINDOW_SIZE) -> None:
        """
        Args:
            latency_window_size: Samples kept per latency metric.
        """
        self._window_size = latency_window_size
        self._windows: dict[str, LatencyWindow] = {}
        self._counters: Counter[str] = Counter()
        self._opportunities = OpportunityStats()
        self._started = time.monotonic()

    def record_latency(self, name: str, latency_us: int) -> None:
        """Add a latency sample in microseconds."""
        window = self._windows.get(name)
        if window is None:
            window = self._windows[name] = LatencyWindow(self._window_size)
        window.add(latency_us)

    def increment_counter(self, name: str, value: int = 1) -> None:
        self._counters[name] += value

    def get_counter(self, name: str) -> int:
        return self._counters[name]

    def get_latency_stats(self, name: str) -> LatencyStats:
        """
        Summarize one latency metric.

        Args:
            name: Metric name.

        Returns:
            Window statistics; all zero if nothing was recorded.
        """
        window = self._windows.get(name)
        return window.summarize() if window is not None else LatencyStats()

    def record_opportunity(self, opportunity: ArbitrageOpportunity) -> None:
        """Add a reported opportunity to the running totals."""
        stats = self._opportunities
        stats.opportunities_reported += 1
        stats.total_profit += opportunity.estimated_profit
        stats.best_profit = max(stats.best_profit, opportunity.estimated_profit)

        if opportunity.direction is ArbitrageDirection.SELL_EXCHANGE_BUY_ORACLE_SIDE:
            stats.sell_side += 1
        else:
            stats.buy_side += 1

    @property
    def opportunity_stats(self) -> OpportunityStats:
        return self._opportunities

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started

    def to_dict(self) -> dict[str, object]:
        """
        Export all metrics in a JSON-friendly form.

        Decimals are rendered as strings so no precision is lost.
        """
        stats = self._opportunities
        latencies = {name: window.summarize() for name, window in self._windows.items()}
        return {
            "uptime_seconds": self.uptime_seconds,
            "counters": dict(self._counters),
            "latencies": {
                name: {
                    "count": s.count,
                    "min": s.min_us,
                    "max": s.max_us,
                    "avg": s.avg_us,
                    "p50": s.p50_us,
                    "p99": s.p99_us,
                }
                for name, s in latencies.items()
            },
            "opportunities": {
                "reported": stats.opportunities_reported,
                "sell_side": stats.sell_side,
                "buy_side": stats.buy_side,
                "best_profit": str(stats.best_profit),
                "avg_profit": str(stats.avg_profit),
            },
        }

