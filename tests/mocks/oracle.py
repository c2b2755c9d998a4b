"""
Mock oracle source for testing.

Serves scripted raw readings or failures instead of calling Hermes.
"""

import asyncio
from collections import deque

from oraclearb.core.errors import OracleSourceError
from oraclearb.core.types import RawOracleReading
from oraclearb.utils.time import get_timestamp_s


def make_raw_reading(
    price: int = 69852445,
    confidence: int = 669724,
    exponent: int = -6,
    publish_time: int | None = None,
) -> RawOracleReading:
    """Build a raw reading, published now unless told otherwise."""
    return RawOracleReading(
        price=price,
        confidence=confidence,
        exponent=exponent,
        publish_time=get_timestamp_s() if publish_time is None else publish_time,
    )


class MockOracleSource:
    """
    Scripted oracle source.

    Queued responses are served first, one per call; afterwards every
    call gets `default`. Exceptions are raised instead of returned.
    """

    def __init__(self, default: RawOracleReading | Exception | None = None) -> None:
        self.default = default
        self.calls: list[str] = []
        self.closed = False
        self._responses: deque[RawOracleReading | Exception] = deque()

    def push(self, *responses: RawOracleReading | Exception) -> None:
        """Queue responses for the next calls."""
        self._responses.extend(responses)

    async def load_reading(self, price_id: str) -> RawOracleReading:
        self.calls.append(price_id)
        await asyncio.sleep(0)

        response = self._responses.popleft() if self._responses else self.default
        if response is None:
            raise OracleSourceError("No reading scripted")
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True
