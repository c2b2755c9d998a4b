"""
Async Pyth Hermes price source.

Loads the latest published price for a feed id with one HTTP request:
- Connection pooling and keep-alive on a single session
- Fast JSON parsing with orjson
- Pydantic validation of the response
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiohttp
import orjson
from pydantic import ValidationError

from oraclearb.config.constants import (
    DEFAULT_ORACLE_REQUEST_TIMEOUT_S,
    ENDPOINT_LATEST_PRICE,
    PYTH_HERMES_URL,
)
from oraclearb.core.errors import OracleSourceError
from oraclearb.core.types import RawOracleReading
from oraclearb.oracle.models import HermesLatestPriceResponse


logger = logging.getLogger(__name__)


def parse_latest_price(payload: bytes | str, price_id: str) -> RawOracleReading:
    """
    Extract the reading for one feed from a latest-price response body.

    Args:
        payload: Raw response body.
        price_id: Requested feed id.

    Returns:
        Raw reading for the feed.

    Raises:
        OracleSourceError: If the body is not valid JSON, does not match the
            expected schema, or does not contain the feed.
    """
    try:
        data = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise OracleSourceError(f"Invalid JSON response: {e}") from e

    try:
        response = HermesLatestPriceResponse.model_validate(data)
    except ValidationError as e:
        raise OracleSourceError(f"Unexpected response schema: {e}") from e

    feed = response.get_feed(price_id)
    if feed is None:
        raise OracleSourceError(f"Price feed {price_id} missing from response")

    return feed.price.to_reading()


class HermesPriceSource:
    """
    Oracle source backed by the Pyth Hermes HTTP API.

    Each `load_reading` call is a single request; retries belong to
    the caller's polling loop.
    """

    def __init__(
        self,
        base_url: str = PYTH_HERMES_URL,
        request_timeout_s: float = DEFAULT_ORACLE_REQUEST_TIMEOUT_S,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize the price source.

        Args:
            base_url: Hermes base URL.
            request_timeout_s: Total timeout per request.
            session: Optional externally owned session.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=request_timeout_s)
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=10,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self._timeout,
            )
            self._owns_session = True

        return self._session

    async def close(self) -> None:
        """Close the session if this source created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    @asynccontextmanager
    async def _request_context(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Context manager for making requests."""
        session = await self._get_session()
        try:
            yield session
        except aiohttp.ClientError as e:
            raise OracleSourceError(f"Network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise OracleSourceError("Request timed out") from e

    async def load_reading(self, price_id: str) -> RawOracleReading:
        """
        Load the latest published reading for a price feed.

        Args:
            price_id: Pyth price feed id (hex, optional 0x prefix).

        Returns:
            Raw reading with integer mantissas.

        Raises:
            OracleSourceError: On network, HTTP or payload errors.
        """
        url = f"{self._base_url}{ENDPOINT_LATEST_PRICE}"
        params: dict[str, Any] = {"ids[]": price_id, "parsed": "true"}

        async with self._request_context() as session:
            async with session.get(url, params=params) as response:
                body = await response.read()

                if response.status >= 400:
                    raise OracleSourceError(
                        f"Hermes error {response.status}: {body[:200]!r}",
                        status=response.status,
                    )

        return parse_latest_price(body, price_id)

    async def __aenter__(self) -> "HermesPriceSource":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
