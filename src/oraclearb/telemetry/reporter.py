"""
Opportunity reporter.

Receives detected opportunities from the detection loop, logs them and
records them in the metrics, and renders a session summary on shutdown.
"""

import logging
import sys
from datetime import timedelta
from typing import TextIO

import orjson

from oraclearb.core.types import ArbitrageOpportunity
from oraclearb.telemetry.metrics import MetricsCollector


logger = logging.getLogger(__name__)


class OpportunityReporter:
    """
    Structured sink for detected opportunities.

    `report` never blocks on I/O beyond a queued log record, so the
    detection loop is not held up by consumers.
    """

    def __init__(
        self,
        metrics: MetricsCollector,
        pair_symbol: str = "",
        output: TextIO | None = None,
        emit_json: bool = False,
    ) -> None:
        """
        Initialize the reporter.

        Args:
            metrics: Metrics collector instance.
            pair_symbol: Monitored pair, shown in the summary.
            output: Stream for the summary (default: stdout).
            emit_json: Also log each opportunity as a JSON line.
        """
        self._metrics = metrics
        self._pair_symbol = pair_symbol
        self._output = output or sys.stdout
        self._emit_json = emit_json
        self._last: ArbitrageOpportunity | None = None

    @property
    def last_reported(self) -> ArbitrageOpportunity | None:
        return self._last

    def report(self, opportunity: ArbitrageOpportunity) -> None:
        """
        Accept a new opportunity.

        Args:
            opportunity: Opportunity returned by the detector.
        """
        self._last = opportunity
        self._metrics.record_opportunity(opportunity)

        logger.info(
            f"Opportunity {opportunity.direction.value}: "
            f"qty={opportunity.quantity} "
            f"exchange={opportunity.exchange_price} "
            f"oracle={opportunity.oracle_price} "
            f"profit={opportunity.estimated_profit}"
        )

        if self._emit_json:
            logger.info(orjson.dumps(opportunity.to_dict()).decode())

    def _format_uptime(self, seconds: float) -> str:
        """Format uptime as HH:MM:SS."""
        td = timedelta(seconds=int(seconds))
        hours, remainder = divmod(int(td.total_seconds()), 3600)
        minutes, secs = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"

    def render_summary(self) -> str:
        """
        Render the session summary.

        Returns:
            Multi-line summary string.
        """
        stats = self._metrics.opportunity_stats
        detect = self._metrics.get_latency_stats("detect")
        fetch = self._metrics.get_latency_stats("oracle_fetch")
        detect_avg = f"{detect.avg_us:.0f}μs" if detect.count > 0 else "---"
        fetch_avg = f"{fetch.avg_us / 1000:.1f}ms" if fetch.count > 0 else "---"

        lines = [
            "=" * 50,
            "  SESSION SUMMARY",
            "=" * 50,
            f"  Pair: {self._pair_symbol or '---'}",
            f"  Uptime: {self._format_uptime(self._metrics.uptime_seconds)}",
            "",
            "  FEEDS:",
            f"    Oracle updates:   {self._metrics.get_counter('oracle_updates'):,}",
            f"    Oracle stale:     {self._metrics.get_counter('oracle_stale'):,}",
            f"    Oracle failures:  {self._metrics.get_counter('oracle_unavailable'):,}",
            f"    Ticker updates:   {self._metrics.get_counter('ticker_updates'):,}",
            f"    Keep-alives:      {self._metrics.get_counter('keep_alives'):,}",
            "",
            "  OPPORTUNITIES:",
            f"    Reported:   {stats.opportunities_reported:,}",
            f"    Sell side:  {stats.sell_side:,}",
            f"    Buy side:   {stats.buy_side:,}",
            f"    Best:       {stats.best_profit}",
            "",
            "  LATENCY:",
            f"    Oracle fetch: {fetch_avg}",
            f"    Detect:       {detect_avg}",
            "=" * 50,
        ]
        return "\n".join(lines)

    def print_summary(self) -> None:
        """Write the session summary to the output stream."""
        self._output.write("\n" + self.render_summary() + "\n")
        self._output.flush()
