"""Market data module for the exchange bookTicker stream."""

from oraclearb.market.models import BookTickerEvent, CombinedStreamMessage
from oraclearb.market.stream import ExchangeStream, StreamState, decode_frame


__all__ = [
    "BookTickerEvent",
    "CombinedStreamMessage",
    "ExchangeStream",
    "StreamState",
    "decode_frame",
]
