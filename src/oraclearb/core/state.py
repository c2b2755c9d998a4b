"""
Shared price state written by the producers and read by the detector.

Holds the latest oracle reading and the latest exchange ticker in two
independently locked slots so that one producer never waits on the other.
"""

import asyncio

from oraclearb.core.types import OracleReading, PriceSnapshot, TickerReading


class SharedPriceState:
    """
    Two optional price slots, each behind its own lock.

    Each producer writes only its own slot. Readers take one lock at a
    time, so a snapshot may pair an older reading with a newer ticker.
    """

    __slots__ = ("_oracle", "_oracle_lock", "_ticker", "_ticker_lock")

    def __init__(self) -> None:
        self._oracle: OracleReading | None = None
        self._oracle_lock = asyncio.Lock()
        self._ticker: TickerReading | None = None
        self._ticker_lock = asyncio.Lock()

    async def write_oracle(self, reading: OracleReading | None) -> None:
        """
        Replace the oracle slot.

        Args:
            reading: New reading, or None to mark the oracle as having
                no current price.
        """
        async with self._oracle_lock:
            self._oracle = reading

    async def write_ticker(self, reading: TickerReading) -> None:
        """Replace the ticker slot."""
        async with self._ticker_lock:
            self._ticker = reading

    async def read_snapshot(self) -> PriceSnapshot:
        """
        Read both slots.

        The oracle lock is released before the ticker lock is taken.

        Returns:
            Current (oracle, ticker) pair; either may be None.
        """
        async with self._oracle_lock:
            oracle = self._oracle

        async with self._ticker_lock:
            ticker = self._ticker

        return PriceSnapshot(oracle=oracle, ticker=ticker)

    @property
    def latest_oracle(self) -> OracleReading | None:
        """Unlocked peek at the oracle slot, for diagnostics."""
        return self._oracle

    @property
    def latest_ticker(self) -> TickerReading | None:
        """Unlocked peek at the ticker slot, for diagnostics."""
        return self._ticker
