"""
Oracle client with staleness filtering.

Turns raw collaborator readings into scaled `OracleReading` values and
refuses to hand out readings older than the staleness window.
"""

import asyncio
import logging

import aiohttp

from oraclearb.config.constants import ORACLE_MAX_AGE_S
from oraclearb.core.errors import OracleSourceError, OracleUnavailableError, StaleDataError
from oraclearb.core.types import OracleReading, OracleSource
from oraclearb.utils.time import get_timestamp_s


logger = logging.getLogger(__name__)


class OracleClient:
    """
    Single-shot reader of the latest oracle price.

    There is no retry or backoff here; the polling loop calls
    `fetch_latest` again on failure.
    """

    def __init__(self, source: OracleSource) -> None:
        """
        Initialize the client.

        Args:
            source: Collaborator loading raw readings.
        """
        self._source = source

    @property
    def source(self) -> OracleSource:
        return self._source

    async def fetch_latest(self, price_id: str, now: int | None = None) -> OracleReading:
        """
        Fetch the current reading for a price feed.

        Args:
            price_id: Oracle price feed id.
            now: Caller-observed Unix time in seconds (defaults to the
                wall clock).

        Returns:
            Scaled reading published within the last 60 seconds.

        Raises:
            OracleUnavailableError: If the collaborator failed or returned
                an unusable reading.
            StaleDataError: If the reading is older than the window.
        """
        try:
            raw = await self._source.load_reading(price_id)
        except (OracleSourceError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise OracleUnavailableError(f"Could not load price {price_id}: {e}") from e

        if now is None:
            now = get_timestamp_s()

        age_s = now - raw.publish_time
        if age_s > ORACLE_MAX_AGE_S:
            raise StaleDataError(
                f"Price {price_id} is {age_s}s old (limit {ORACLE_MAX_AGE_S}s)",
                age_s=age_s,
            )

        try:
            return OracleReading.from_raw(raw)
        except ValueError as e:
            raise OracleUnavailableError(f"Unusable reading for {price_id}: {e}") from e

    async def close(self) -> None:
        """Close the underlying source."""
        await self._source.close()
