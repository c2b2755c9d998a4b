"""Core module containing the shared price state, errors, and type definitions."""

from oraclearb.core.errors import (
    ConnectError,
    DecodeError,
    OracleArbError,
    OracleUnavailableError,
    StaleDataError,
    SubscribeRejected,
    UnsubscribeError,
)
from oraclearb.core.state import SharedPriceState
from oraclearb.core.types import (
    ArbitrageDirection,
    ArbitrageOpportunity,
    OracleReading,
    PriceSnapshot,
    RawOracleReading,
    StreamSignal,
    SubscriptionHandle,
    TickerReading,
)


__all__ = [
    "ArbitrageDirection",
    "ArbitrageOpportunity",
    "ConnectError",
    "DecodeError",
    "OracleArbError",
    "OracleReading",
    "OracleUnavailableError",
    "PriceSnapshot",
    "RawOracleReading",
    "SharedPriceState",
    "StaleDataError",
    "StreamSignal",
    "SubscribeRejected",
    "SubscriptionHandle",
    "TickerReading",
    "UnsubscribeError",
]
