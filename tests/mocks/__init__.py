"""Mock implementations for testing."""

from tests.mocks.oracle import MockOracleSource, make_raw_reading
from tests.mocks.websocket import MockSession, MockWebSocket


__all__ = [
    "MockOracleSource",
    "MockSession",
    "MockWebSocket",
    "make_raw_reading",
]
