"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

import io
from decimal import Decimal

import pytest

from oraclearb.config.settings import Settings
from oraclearb.core.state import SharedPriceState
from oraclearb.core.types import OracleReading, PriceSnapshot, TickerReading
from oraclearb.market.stream import ExchangeStream
from oraclearb.oracle.client import OracleClient
from oraclearb.strategy.detector import ArbitrageDetector
from oraclearb.telemetry.metrics import MetricsCollector
from oraclearb.telemetry.reporter import OpportunityReporter
from tests.mocks import MockOracleSource, MockSession, MockWebSocket, make_raw_reading


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        binance_ticker="solusdt",
    )


# =============================================================================
# Oracle Fixtures
# =============================================================================


@pytest.fixture
def oracle_sol() -> OracleReading:
    """SOL/USD reading: 69.852445 ± 0.669724."""
    return OracleReading(
        price=Decimal("69.852445"),
        confidence=Decimal("0.669724"),
        observed_at=1704067200,
    )


@pytest.fixture
def oracle_btc() -> OracleReading:
    """High-priced reading: 48561.26854 ± 6.12455."""
    return OracleReading(
        price=Decimal("48561.26854"),
        confidence=Decimal("6.12455"),
        observed_at=1704067200,
    )


# =============================================================================
# Ticker Fixtures
# =============================================================================


@pytest.fixture
def ticker_rich_bid() -> TickerReading:
    """Bid above the SOL upper bound."""
    return TickerReading(
        best_bid=Decimal("71.3833"),
        best_bid_qty=Decimal("0.8574"),
        best_ask=Decimal("72.0012"),
        best_ask_qty=Decimal("0.9245"),
        symbol="SOLUSDT",
        update_id=1,
    )


@pytest.fixture
def ticker_cheap_ask() -> TickerReading:
    """Ask below the SOL lower bound."""
    return TickerReading(
        best_bid=Decimal("67.5421"),
        best_bid_qty=Decimal("1.1258"),
        best_ask=Decimal("67.8423"),
        best_ask_qty=Decimal("2.5569"),
        symbol="SOLUSDT",
        update_id=2,
    )


@pytest.fixture
def ticker_inside() -> TickerReading:
    """Book inside the SOL fair-value interval."""
    return TickerReading(
        best_bid=Decimal("69.2222"),
        best_bid_qty=Decimal("3.0"),
        best_ask=Decimal("69.1111"),
        best_ask_qty=Decimal("4.0"),
        symbol="SOLUSDT",
        update_id=3,
    )


@pytest.fixture
def snapshot_sell(oracle_sol: OracleReading, ticker_rich_bid: TickerReading) -> PriceSnapshot:
    return PriceSnapshot(oracle=oracle_sol, ticker=ticker_rich_bid)


@pytest.fixture
def snapshot_buy(oracle_sol: OracleReading, ticker_cheap_ask: TickerReading) -> PriceSnapshot:
    return PriceSnapshot(oracle=oracle_sol, ticker=ticker_cheap_ask)


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def detector() -> ArbitrageDetector:
    """Detector with the 95% confidence multiplier."""
    return ArbitrageDetector()


@pytest.fixture
def price_state() -> SharedPriceState:
    """Empty shared price state."""
    return SharedPriceState()


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector()


@pytest.fixture
def reporter(metrics: MetricsCollector) -> OpportunityReporter:
    """Reporter writing its summary to a buffer."""
    return OpportunityReporter(metrics=metrics, pair_symbol="solusdt", output=io.StringIO())


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_ws() -> MockWebSocket:
    """Mock WebSocket acknowledging every request."""
    return MockWebSocket()


@pytest.fixture
def mock_session(mock_ws: MockWebSocket) -> MockSession:
    return MockSession(ws=mock_ws)


@pytest.fixture
def exchange_stream(mock_session: MockSession) -> ExchangeStream:
    """Unconnected stream over the mock session."""
    return ExchangeStream(url="wss://example.test/stream", session=mock_session)  # type: ignore[arg-type]


@pytest.fixture
def mock_oracle_source() -> MockOracleSource:
    """Source returning a fresh SOL/USD reading on every call."""
    return MockOracleSource(default=make_raw_reading())


@pytest.fixture
def oracle_client(mock_oracle_source: MockOracleSource) -> OracleClient:
    return OracleClient(mock_oracle_source)
