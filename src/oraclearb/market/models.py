"""
Pydantic models for Binance combined-stream messages.

Prices and quantities are parsed straight from their decimal strings
into `Decimal`.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from oraclearb.core.types import TickerReading


class BookTickerEvent(BaseModel):
    """bookTicker payload: best bid/ask price and quantity."""

    update_id: int = Field(alias="u")
    symbol: str = Field(alias="s")
    best_bid: Decimal = Field(alias="b", allow_inf_nan=False)
    best_bid_qty: Decimal = Field(alias="B", allow_inf_nan=False)
    best_ask: Decimal = Field(alias="a", allow_inf_nan=False)
    best_ask_qty: Decimal = Field(alias="A", allow_inf_nan=False)

    model_config = {"populate_by_name": True}

    def to_reading(self) -> TickerReading:
        """Convert to the shared ticker type."""
        return TickerReading(
            best_bid=self.best_bid,
            best_bid_qty=self.best_bid_qty,
            best_ask=self.best_ask,
            best_ask_qty=self.best_ask_qty,
            symbol=self.symbol,
            update_id=self.update_id,
        )


class CombinedStreamMessage(BaseModel):
    """Envelope of a combined-stream data frame."""

    stream: str
    data: BookTickerEvent
