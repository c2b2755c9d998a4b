"""
Type definitions for the spread monitor.

This module contains the dataclasses, enums, TypedDicts, and Protocol
definitions shared across the application. Prices and quantities are
always `Decimal`; binary floats never enter the detection path.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from typing import NamedTuple, Protocol, TypedDict

from oraclearb.config.constants import BOOK_TICKER_STREAM
from oraclearb.utils.math import scale_mantissa


# =============================================================================
# Enums
# =============================================================================


class ArbitrageDirection(str, Enum):
    """Which side of the exchange book the opportunity trades against."""

    SELL_EXCHANGE_BUY_ORACLE_SIDE = "SELL_EXCHANGE_BUY_ORACLE_SIDE"
    BUY_EXCHANGE_SELL_ORACLE_SIDE = "BUY_EXCHANGE_SELL_ORACLE_SIDE"


class StreamSignal(Enum):
    """Non-data outcomes of reading one frame from the exchange stream."""

    KEEP_ALIVE = auto()
    STREAM_ENDED = auto()


# =============================================================================
# Oracle Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class RawOracleReading:
    """
    Oracle reading as published, before exponent scaling.

    price and confidence are integer mantissas; the real value is
    ``mantissa * 10**exponent``.
    """

    price: int
    confidence: int
    exponent: int
    publish_time: int


@dataclass(slots=True, frozen=True)
class OracleReading:
    """
    Scaled oracle price with its confidence half-width.

    observed_at is the oracle publish time in Unix seconds.
    """

    price: Decimal
    confidence: Decimal
    observed_at: int

    def __post_init__(self) -> None:
        if self.confidence < 0:
            raise ValueError(f"Oracle confidence must be non-negative, got {self.confidence}")

    @classmethod
    def from_raw(cls, raw: RawOracleReading) -> "OracleReading":
        """Scale mantissas by the published power-of-ten exponent."""
        return cls(
            price=scale_mantissa(raw.price, raw.exponent),
            confidence=scale_mantissa(raw.confidence, raw.exponent),
            observed_at=raw.publish_time,
        )


# =============================================================================
# Market Data Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class TickerReading:
    """
    Best bid and ask (top of book) for one pair.

    best_bid <= best_ask is not guaranteed; exchange data can be
    momentarily crossed.
    """

    best_bid: Decimal
    best_bid_qty: Decimal
    best_ask: Decimal
    best_ask_qty: Decimal
    symbol: str
    update_id: int


class PriceSnapshot(NamedTuple):
    """Current contents of both price slots, read one slot at a time."""

    oracle: OracleReading | None
    ticker: TickerReading | None


@dataclass(slots=True, frozen=True)
class SubscriptionHandle:
    """Active exchange subscription, consumed once by unsubscribe."""

    stream_id: int
    pair_symbol: str

    @property
    def stream_name(self) -> str:
        return f"{self.pair_symbol}@{BOOK_TICKER_STREAM}"


# =============================================================================
# Opportunity Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class ArbitrageOpportunity:
    """
    Fee-adjusted arbitrage between the exchange book and the oracle bound.

    Frozen so that consecutive detections can be compared structurally.
    oracle_price is the confidence bound the exchange price was compared to.
    """

    direction: ArbitrageDirection
    quantity: Decimal
    estimated_profit: Decimal
    exchange_price: Decimal
    oracle_price: Decimal

    def to_dict(self) -> dict[str, str]:
        """Serializable form with decimals kept as exact strings."""
        return {
            "direction": self.direction.value,
            "quantity": str(self.quantity),
            "estimated_profit": str(self.estimated_profit),
            "exchange_price": str(self.exchange_price),
            "oracle_price": str(self.oracle_price),
        }


# =============================================================================
# TypedDicts for Wire Messages
# =============================================================================


class BookTickerData(TypedDict):
    """Binance bookTicker WebSocket payload."""

    u: int  # Update ID
    s: str  # Symbol
    b: str  # Best bid price
    B: str  # Best bid qty
    a: str  # Best ask price
    A: str  # Best ask qty


class StreamRequest(TypedDict):
    """SUBSCRIBE / UNSUBSCRIBE request frame."""

    method: str
    params: list[str]
    id: int


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class OracleSource(Protocol):
    """Collaborator that loads the latest raw reading for a price feed."""

    async def load_reading(self, price_id: str) -> RawOracleReading:
        """Load the latest published reading."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
