"""
Unit tests for metrics collection and opportunity reporting.
"""

import io
import logging
from decimal import Decimal

import orjson
import pytest

from oraclearb.core.types import ArbitrageDirection, ArbitrageOpportunity
from oraclearb.telemetry.logger import AsyncLogger, build_handlers
from oraclearb.telemetry.metrics import MetricsCollector
from oraclearb.telemetry.reporter import OpportunityReporter


def make_opportunity(
    direction: ArbitrageDirection = ArbitrageDirection.SELL_EXCHANGE_BUY_ORACLE_SIDE,
    profit: str = "0.03400176",
) -> ArbitrageOpportunity:
    return ArbitrageOpportunity(
        direction=direction,
        quantity=Decimal("0.8574"),
        estimated_profit=Decimal(profit),
        exchange_price=Decimal("71.3833"),
        oracle_price=Decimal("71.27225988"),
    )


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_counters(self, metrics: MetricsCollector) -> None:
        metrics.increment_counter("ticker_updates")
        metrics.increment_counter("ticker_updates", 2)

        assert metrics.get_counter("ticker_updates") == 3
        assert metrics.get_counter("missing") == 0

    def test_latency_stats(self, metrics: MetricsCollector) -> None:
        for value in (10, 20, 30, 40):
            metrics.record_latency("detect", value)

        stats = metrics.get_latency_stats("detect")

        assert stats.count == 4
        assert stats.min_us == 10
        assert stats.max_us == 40
        assert stats.avg_us == 25.0

    def test_latency_window(self) -> None:
        metrics = MetricsCollector(latency_window_size=2)
        for value in (1, 2, 3):
            metrics.record_latency("detect", value)

        assert metrics.get_latency_stats("detect").min_us == 2

    def test_opportunities(self, metrics: MetricsCollector) -> None:
        metrics.record_opportunity(make_opportunity(profit="0.5"))
        metrics.record_opportunity(
            make_opportunity(ArbitrageDirection.BUY_EXCHANGE_SELL_ORACLE_SIDE, profit="1.5")
        )

        stats = metrics.opportunity_stats
        assert stats.opportunities_reported == 2
        assert stats.sell_side == 1
        assert stats.buy_side == 1
        assert stats.best_profit == Decimal("1.5")
        assert stats.avg_profit == Decimal("1")

    def test_to_dict(self, metrics: MetricsCollector) -> None:
        metrics.increment_counter("oracle_updates")
        metrics.record_opportunity(make_opportunity())

        data = metrics.to_dict()
        assert data["counters"] == {"oracle_updates": 1}
        assert data["opportunities"]["best_profit"] == "0.03400176"  # type: ignore[index]


class TestOpportunityReporter:
    """Tests for OpportunityReporter."""

    def test_report(self, reporter: OpportunityReporter, metrics: MetricsCollector) -> None:
        opportunity = make_opportunity()

        reporter.report(opportunity)

        assert reporter.last_reported == opportunity
        assert metrics.opportunity_stats.opportunities_reported == 1

    def test_report_logs(
        self, reporter: OpportunityReporter, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="oraclearb.telemetry.reporter"):
            reporter.report(make_opportunity())

        assert "SELL_EXCHANGE_BUY_ORACLE_SIDE" in caplog.text
        assert "profit=0.03400176" in caplog.text

    def test_json_lines(self, metrics: MetricsCollector, caplog: pytest.LogCaptureFixture) -> None:
        reporter = OpportunityReporter(metrics=metrics, emit_json=True, output=io.StringIO())

        with caplog.at_level(logging.INFO, logger="oraclearb.telemetry.reporter"):
            reporter.report(make_opportunity())

        payload = orjson.loads(caplog.records[-1].getMessage())
        assert payload["estimated_profit"] == "0.03400176"
        assert payload["direction"] == "SELL_EXCHANGE_BUY_ORACLE_SIDE"

    def test_summary(self, reporter: OpportunityReporter, metrics: MetricsCollector) -> None:
        metrics.increment_counter("oracle_updates", 12)
        metrics.increment_counter("keep_alives", 3)
        reporter.report(make_opportunity())

        reporter.print_summary()

        output = reporter._output.getvalue()  # type: ignore[attr-defined]
        assert "SESSION SUMMARY" in output
        assert "Pair: solusdt" in output
        assert "Oracle updates:   12" in output
        assert "Keep-alives:      3" in output
        assert "Best:       0.03400176" in output


class TestAsyncLogger:
    """Tests for the queue-backed logger."""

    def test_start_stop_detaches_handler(self) -> None:
        async_logger = AsyncLogger("oraclearb.test_async_logger", build_handlers(logging.INFO))
        handlers_before = list(async_logger.logger.handlers)

        with async_logger:
            assert async_logger.is_running
            assert len(async_logger.logger.handlers) == len(handlers_before) + 1
            async_logger.logger.info("queued record")

        assert not async_logger.is_running
        assert async_logger.logger.handlers == handlers_before

    def test_file_output(self, tmp_path) -> None:
        log_file = tmp_path / "logs" / "monitor.log"
        async_logger = AsyncLogger(
            "oraclearb.test_file_logger", build_handlers(logging.INFO, log_file)
        )

        with async_logger:
            async_logger.logger.debug("debug line")

        assert "debug line" in log_file.read_text()
