"""
Spread monitor orchestrator.

Runs the oracle poller, the exchange stream reader and the detection
loop as concurrent tasks over one shared price state, and owns their
startup and coordinated shutdown.
"""

import asyncio
import logging
import signal
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal

import orjson

from oraclearb.config.settings import Settings
from oraclearb.core.errors import (
    DecodeError,
    OracleUnavailableError,
    StaleDataError,
    UnsubscribeError,
)
from oraclearb.core.state import SharedPriceState
from oraclearb.core.types import StreamSignal, SubscriptionHandle
from oraclearb.market.stream import ExchangeStream
from oraclearb.oracle.client import OracleClient
from oraclearb.oracle.hermes import HermesPriceSource
from oraclearb.strategy.detector import ArbitrageDetector
from oraclearb.strategy.fees import resolve_taker_fee
from oraclearb.telemetry.logger import AsyncLogger, setup_logging
from oraclearb.telemetry.metrics import MetricsCollector
from oraclearb.telemetry.reporter import OpportunityReporter
from oraclearb.utils.time import LatencyTimer, format_duration_us, format_timestamp_s


logger = logging.getLogger(__name__)


class ArbitrageMonitor:
    """
    Oracle/exchange spread monitor.

    Manages the lifecycle of:
    - Oracle polling
    - Exchange stream subscription and reading
    - Opportunity detection and reporting
    - Telemetry
    """

    def __init__(
        self,
        settings: Settings,
        *,
        oracle: OracleClient | None = None,
        stream: ExchangeStream | None = None,
        state: SharedPriceState | None = None,
        detector: ArbitrageDetector | None = None,
        metrics: MetricsCollector | None = None,
        reporter: OpportunityReporter | None = None,
        configure_logging: bool = True,
    ) -> None:
        """
        Initialize the monitor.

        Components not supplied are built from settings in `setup`.

        Args:
            settings: Application settings.
            oracle: Oracle client.
            stream: Exchange stream (connected in `setup` if needed).
            state: Shared price state.
            detector: Arbitrage detector.
            metrics: Metrics collector.
            reporter: Opportunity sink.
            configure_logging: Install the queue-based log handlers.
        """
        self._settings = settings
        self._configure_logging = configure_logging
        self._running = False
        self._closed = False
        self._shutdown_event = asyncio.Event()

        self._oracle = oracle
        self._stream = stream
        self._state = state or SharedPriceState()
        self._detector = detector or ArbitrageDetector()
        self._metrics = metrics or MetricsCollector()
        self._reporter = reporter or OpportunityReporter(
            metrics=self._metrics,
            pair_symbol=settings.binance_ticker,
            emit_json=settings.emit_json,
        )

        self._async_logger: AsyncLogger | None = None
        self._subscription: SubscriptionHandle | None = None
        self._taker_fee = resolve_taker_fee(settings.binance_ticker, settings.taker_fee)
        self._tasks: list[asyncio.Task[None]] = []

    async def setup(self) -> None:
        """
        Build missing components, connect and subscribe.

        Raises:
            ConnectError: If the exchange stream cannot connect.
            SubscribeRejected: If the subscription is not acknowledged.
        """
        if self._configure_logging and self._async_logger is None:
            self._async_logger = setup_logging(
                level=self._settings.log_level,
                log_file=self._settings.log_file,
            )

        logger.info("Initializing spread monitor...")

        if self._oracle is None:
            self._oracle = OracleClient(
                HermesPriceSource(
                    base_url=self._settings.hermes_url,
                    request_timeout_s=self._settings.oracle_request_timeout_s,
                )
            )

        if self._stream is None:
            self._stream = ExchangeStream(url=self._settings.exchange_ws_url)

        await self._stream.connect()
        self._subscription = await self._stream.subscribe(self._settings.binance_ticker)
        logger.info(
            f"Monitoring {self._settings.binance_ticker} against feed "
            f"{self._settings.pyth_price_id} (taker fee {self._taker_fee})"
        )

    # =========================================================================
    # Loops
    # =========================================================================

    async def _oracle_loop(self) -> None:
        """Poll the oracle and publish each result into the shared state."""
        oracle = self._oracle
        price_id = self._settings.pyth_price_id
        interval = self._settings.oracle_poll_interval_s

        while True:
            try:
                with LatencyTimer() as timer:
                    reading = await oracle.fetch_latest(price_id)  # type: ignore[union-attr]
            except StaleDataError as e:
                logger.warning(str(e))
                await self._state.write_oracle(None)
                self._metrics.increment_counter("oracle_stale")
            except OracleUnavailableError as e:
                logger.warning(str(e))
                self._metrics.increment_counter("oracle_unavailable")
            else:
                await self._state.write_oracle(reading)
                self._metrics.record_latency("oracle_fetch", timer.latency_us)
                self._metrics.increment_counter("oracle_updates")
                logger.debug(
                    f"Oracle {reading.price} ± {reading.confidence} "
                    f"published {format_timestamp_s(reading.observed_at)} "
                    f"(fetched in {format_duration_us(timer.latency_us)})"
                )

            await asyncio.sleep(interval)

    async def _stream_loop(self) -> None:
        """Read exchange frames until the stream ends."""
        stream = self._stream

        while True:
            result = await stream.read_next()  # type: ignore[union-attr]

            if result is StreamSignal.STREAM_ENDED:
                logger.warning("Exchange stream ended")
                return

            if result is StreamSignal.KEEP_ALIVE:
                self._metrics.increment_counter("keep_alives")
            else:
                await self._state.write_ticker(result)
                self._metrics.increment_counter("ticker_updates")

            await asyncio.sleep(0)

    async def _detection_loop(self) -> None:
        """Evaluate snapshots and hand new opportunities to the reporter."""
        fee = self._taker_fee
        interval = self._settings.detection_interval_s

        while True:
            snapshot = await self._state.read_snapshot()

            with LatencyTimer() as timer:
                opportunity = self._detector.detect(snapshot, fee)
            self._metrics.record_latency("detect", timer.latency_us)

            if opportunity is not None:
                self._reporter.report(opportunity)

            await asyncio.sleep(interval)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        """Log producer failures; the remaining loops keep running."""
        if task.cancelled():
            return

        exc = task.exception()
        if exc is None:
            logger.info(f"Task {task.get_name()} finished")
        elif isinstance(exc, DecodeError):
            logger.error(f"Task {task.get_name()} failed on undecodable frame: {exc}")
        else:
            logger.error(f"Task {task.get_name()} failed: {exc!r}")

    def start(self) -> None:
        """Start the three loops as tasks on the running event loop."""
        if self._tasks:
            return

        self._running = True
        for name, coro in (
            ("oracle", self._oracle_loop()),
            ("stream", self._stream_loop()),
            ("detection", self._detection_loop()),
        ):
            task = asyncio.create_task(coro, name=name)
            task.add_done_callback(self._on_task_done)
            self._tasks.append(task)

    async def run(self, install_signal_handlers: bool = True) -> None:
        """
        Run the monitor until a shutdown is requested.

        Args:
            install_signal_handlers: Route SIGINT/SIGTERM to `request_shutdown`.
        """
        if install_signal_handlers:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self.request_shutdown)

        try:
            logger.info("Starting spread monitor...")
            self.start()
            await self._shutdown_event.wait()
        finally:
            await self.shutdown()

    def request_shutdown(self) -> None:
        """Handle shutdown signal."""
        logger.info("Shutdown signal received")
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Cancel the loops, release the connections and print the summary."""
        if self._closed:
            return
        self._closed = True
        self._running = False
        self._shutdown_event.set()

        logger.info("Shutting down spread monitor...")

        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self._stream is not None:
            if self._subscription is not None:
                try:
                    await self._stream.unsubscribe(self._subscription)
                except UnsubscribeError as e:
                    logger.warning(str(e))
                self._subscription = None
            await self._stream.close()

        if self._oracle is not None:
            await self._oracle.close()

        if self._tasks:
            stats = self._detector.stats
            logger.info(
                f"Detection passes: {stats.evaluations} "
                f"(incomplete {stats.incomplete_snapshots}, "
                f"unprofitable {stats.unprofitable}, "
                f"duplicates {stats.duplicates_suppressed}, "
                f"reported {stats.opportunities_emitted})"
            )
            self._reporter.print_summary()
            if self._settings.emit_json:
                logger.info(orjson.dumps(self._metrics.to_dict()).decode())

        logger.info("Spread monitor shutdown complete")

        if self._async_logger:
            self._async_logger.stop()
            self._async_logger = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_running(self) -> bool:
        """Check if the loops are running."""
        return self._running

    @property
    def state(self) -> SharedPriceState:
        return self._state

    @property
    def metrics(self) -> MetricsCollector:
        """Get metrics collector."""
        return self._metrics

    @property
    def taker_fee(self) -> Decimal:
        return self._taker_fee

    @property
    def subscription(self) -> SubscriptionHandle | None:
        return self._subscription

    @property
    def tasks(self) -> list[asyncio.Task[None]]:
        return list(self._tasks)


@asynccontextmanager
async def create_monitor(settings: Settings, **components: object) -> AsyncIterator[ArbitrageMonitor]:
    """
    Create and manage monitor lifecycle.

    Usage:
        async with create_monitor(settings) as monitor:
            await monitor.run()
    """
    monitor = ArbitrageMonitor(settings, **components)  # type: ignore[arg-type]

    try:
        await monitor.setup()
        yield monitor
    finally:
        await monitor.shutdown()
