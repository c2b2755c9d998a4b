"""
Pydantic models for Pyth Hermes API responses.

These models provide type-safe parsing of oracle responses
with automatic validation.
"""

from pydantic import BaseModel, Field

from oraclearb.core.types import RawOracleReading


def normalize_feed_id(feed_id: str) -> str:
    """Lowercase a feed id and strip the optional 0x prefix."""
    feed_id = feed_id.lower()
    return feed_id[2:] if feed_id.startswith("0x") else feed_id


class HermesPrice(BaseModel):
    """Price component of a parsed feed; price and conf are integer strings."""

    price: int
    conf: int = Field(ge=0)
    expo: int
    publish_time: int

    def to_reading(self) -> RawOracleReading:
        """Convert to the collaborator reading type."""
        return RawOracleReading(
            price=self.price,
            confidence=self.conf,
            exponent=self.expo,
            publish_time=self.publish_time,
        )


class HermesParsedPriceFeed(BaseModel):
    """Single feed in the `parsed` section of a latest-price response."""

    id: str
    price: HermesPrice
    ema_price: HermesPrice | None = None


class HermesLatestPriceResponse(BaseModel):
    """Response of GET /v2/updates/price/latest."""

    parsed: list[HermesParsedPriceFeed] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    def get_feed(self, price_id: str) -> HermesParsedPriceFeed | None:
        """Find a feed by id, ignoring case and the 0x prefix."""
        wanted = normalize_feed_id(price_id)
        for feed in self.parsed:
            if normalize_feed_id(feed.id) == wanted:
                return feed
        return None
