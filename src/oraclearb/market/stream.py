"""
Binance bookTicker stream over a single persistent WebSocket.

Implements the small request/acknowledgment protocol of the combined
stream endpoint:
- SUBSCRIBE / UNSUBSCRIBE correlated by request id
- Transparent ping/pong keep-alive
- Decoding of data frames into `TickerReading`
"""

import asyncio
import logging
from enum import Enum, auto
from typing import Any

import aiohttp
import orjson
from pydantic import ValidationError

from oraclearb.config.constants import (
    ACK_RESULT_KEY,
    BINANCE_WS_URL,
    METHOD_SUBSCRIBE,
    METHOD_UNSUBSCRIBE,
    UNSUBSCRIBE_DEADLINE_S,
    WS_MAX_MESSAGE_SIZE,
)
from oraclearb.core.errors import (
    ConnectError,
    DecodeError,
    SubscribeRejected,
    UnsubscribeError,
)
from oraclearb.core.types import StreamRequest, StreamSignal, SubscriptionHandle, TickerReading
from oraclearb.market.models import CombinedStreamMessage
from oraclearb.utils.time import get_timestamp_ms


logger = logging.getLogger(__name__)


_DATA_TYPES = (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY)
_END_TYPES = (
    aiohttp.WSMsgType.CLOSE,
    aiohttp.WSMsgType.CLOSING,
    aiohttp.WSMsgType.CLOSED,
    aiohttp.WSMsgType.ERROR,
)


class StreamState(Enum):
    """Exchange stream protocol state."""

    DISCONNECTED = auto()
    CONNECTED = auto()
    SUBSCRIBED = auto()
    DRAINING = auto()
    CLOSED = auto()


def is_success_ack(data: Any) -> bool:
    """Check for the `"result": null` acknowledgment marker."""
    return isinstance(data, dict) and ACK_RESULT_KEY in data and data[ACK_RESULT_KEY] is None


def _is_control_frame(data: Any) -> bool:
    return isinstance(data, dict) and "stream" not in data and "id" in data


def decode_frame(raw: str | bytes) -> TickerReading | StreamSignal:
    """
    Decode one text frame.

    Args:
        raw: Frame payload.

    Returns:
        The ticker update, or KEEP_ALIVE for request acknowledgments.

    Raises:
        DecodeError: If the payload is not a valid bookTicker message.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON frame: {e}", payload=raw) from e

    if _is_control_frame(data):
        if is_success_ack(data):
            logger.debug(f"Control frame: {data}")
        else:
            logger.warning(f"Exchange error response: {data}")
        return StreamSignal.KEEP_ALIVE

    try:
        message = CombinedStreamMessage.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Malformed bookTicker frame: {e}", payload=raw) from e

    return message.data.to_reading()


class ExchangeStream:
    """
    One persistent connection to the Binance combined stream.

    The send half and the receive half are guarded by separate locks;
    no method holds both at once, so a pong can be written while another
    caller waits on the next frame.
    """

    def __init__(
        self,
        url: str = BINANCE_WS_URL,
        session: aiohttp.ClientSession | None = None,
        unsubscribe_deadline_s: float = UNSUBSCRIBE_DEADLINE_S,
    ) -> None:
        """
        Initialize the stream.

        Args:
            url: Combined-stream WebSocket URL.
            session: Optional externally owned session.
            unsubscribe_deadline_s: Soft deadline for the unsubscribe
                acknowledgment.
        """
        self._url = url
        self._session = session
        self._owns_session = session is None
        self._unsubscribe_deadline_s = unsubscribe_deadline_s

        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._state = StreamState.DISCONNECTED
        self._send_lock = asyncio.Lock()
        self._recv_lock = asyncio.Lock()
        self._subscriptions: dict[int, SubscriptionHandle] = {}

        self._message_count = 0
        self._keep_alive_count = 0

    @property
    def state(self) -> StreamState:
        """Get current protocol state."""
        return self._state

    @property
    def message_count(self) -> int:
        """Get total data frames decoded."""
        return self._message_count

    @property
    def keep_alive_count(self) -> int:
        """Get total pings answered."""
        return self._keep_alive_count

    @property
    def subscriptions(self) -> list[SubscriptionHandle]:
        return list(self._subscriptions.values())

    # =========================================================================
    # Connection
    # =========================================================================

    async def connect(self) -> None:
        """
        Establish the WebSocket connection.

        Raises:
            ConnectError: If the handshake fails.
        """
        if self._state in (StreamState.CONNECTED, StreamState.SUBSCRIBED):
            return

        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

        logger.info(f"Connecting to {self._url}")

        try:
            # Pings must reach read_next, so aiohttp's autoping stays off
            self._ws = await self._session.ws_connect(
                self._url,
                autoping=False,
                max_msg_size=WS_MAX_MESSAGE_SIZE,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self._state = StreamState.DISCONNECTED
            raise ConnectError(f"Could not connect to {self._url}: {e}") from e

        self._state = StreamState.CONNECTED
        logger.info("Connected successfully")

    async def close(self) -> None:
        """Close the connection and any session this stream created."""
        self._state = StreamState.CLOSED

        if self._ws is not None and not self._ws.closed:
            async with self._send_lock:
                await self._ws.close()

        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

        self._ws = None
        self._subscriptions.clear()

    # =========================================================================
    # Frame I/O
    # =========================================================================

    async def _receive(self) -> aiohttp.WSMessage:
        async with self._recv_lock:
            return await self._ws.receive()  # type: ignore[union-attr]

    async def _send_str(self, text: str) -> None:
        async with self._send_lock:
            await self._ws.send_str(text)  # type: ignore[union-attr]

    async def _pong(self, payload: bytes) -> None:
        async with self._send_lock:
            await self._ws.pong(payload)  # type: ignore[union-attr]

    async def _send_request(self, method: str, handle: SubscriptionHandle) -> None:
        request: StreamRequest = {
            "method": method,
            "params": [handle.stream_name],
            "id": handle.stream_id,
        }
        await self._send_str(orjson.dumps(request).decode())

    def _is_open(self) -> bool:
        return self._ws is not None and not self._ws.closed

    # =========================================================================
    # Protocol
    # =========================================================================

    async def subscribe(self, symbol: str) -> SubscriptionHandle:
        """
        Subscribe to the bookTicker stream of a pair.

        The first response frame after the request is taken as the
        acknowledgment.

        Args:
            symbol: Pair symbol (e.g. "solusdt").

        Returns:
            Handle for the later unsubscribe.

        Raises:
            SubscribeRejected: If the stream is not connected or the
                acknowledgment does not report success.
        """
        symbol = symbol.lower()
        if not self._is_open():
            raise SubscribeRejected(f"Could not subscribe for ticker {symbol}: stream not connected")

        stream_id = get_timestamp_ms()
        while stream_id in self._subscriptions:
            stream_id += 1
        handle = SubscriptionHandle(stream_id=stream_id, pair_symbol=symbol)

        try:
            await self._send_request(METHOD_SUBSCRIBE, handle)

            msg = await self._receive()
            while msg.type in (aiohttp.WSMsgType.PING, aiohttp.WSMsgType.PONG):
                if msg.type == aiohttp.WSMsgType.PING:
                    await self._pong(msg.data)
                msg = await self._receive()
        except (ConnectionError, aiohttp.ClientError) as e:
            raise SubscribeRejected(f"Could not subscribe for ticker {symbol}: {e}") from e

        if msg.type not in _DATA_TYPES:
            raise SubscribeRejected(
                f"Could not subscribe for ticker {symbol}: connection returned {msg.type.name}"
            )

        try:
            ack = orjson.loads(msg.data)
        except orjson.JSONDecodeError:
            ack = None

        if not is_success_ack(ack):
            raise SubscribeRejected(f"Could not subscribe for ticker {symbol}: {msg.data}")

        self._subscriptions[stream_id] = handle
        self._state = StreamState.SUBSCRIBED
        logger.info(f"Subscribed to {handle.stream_name} (id={stream_id})")
        return handle

    async def read_next(self) -> TickerReading | StreamSignal:
        """
        Read one inbound frame.

        Pings are answered with a pong carrying the same payload and
        reported as KEEP_ALIVE; they never surface as data.

        Returns:
            Decoded ticker, KEEP_ALIVE, or STREAM_ENDED.

        Raises:
            DecodeError: If a data frame is malformed.
        """
        if not self._is_open():
            return StreamSignal.STREAM_ENDED

        msg = await self._receive()

        if msg.type == aiohttp.WSMsgType.PING:
            try:
                await self._pong(msg.data)
            except (ConnectionError, aiohttp.ClientError) as e:
                logger.warning(f"Could not answer ping: {e}")
                self._state = StreamState.CLOSED
                return StreamSignal.STREAM_ENDED
            self._keep_alive_count += 1
            return StreamSignal.KEEP_ALIVE

        if msg.type == aiohttp.WSMsgType.PONG:
            return StreamSignal.KEEP_ALIVE

        if msg.type in _END_TYPES:
            logger.warning(f"Stream ended: {msg.type.name} {msg.data!r}")
            self._state = StreamState.CLOSED
            return StreamSignal.STREAM_ENDED

        result = decode_frame(msg.data)
        if isinstance(result, TickerReading):
            self._message_count += 1
        return result

    async def unsubscribe(self, handle: SubscriptionHandle) -> None:
        """
        Cancel a subscription and wait briefly for its acknowledgment.

        Frames are drained until a `"result": null` acknowledgment arrives
        or the deadline passes. The handle is consumed either way.

        Args:
            handle: Handle returned by `subscribe`.

        Raises:
            UnsubscribeError: If the handle is unknown, the stream is closed,
                or no acknowledgment arrived before the deadline.
        """
        if self._subscriptions.pop(handle.stream_id, None) is None:
            raise UnsubscribeError(f"No active subscription with id {handle.stream_id}")

        error_context = (
            f"Could not unsubscribe for ticker {handle.pair_symbol} and id {handle.stream_id}"
        )
        if not self._is_open():
            raise UnsubscribeError(f"{error_context}: stream not connected")

        self._state = StreamState.DRAINING
        try:
            await self._send_request(METHOD_UNSUBSCRIBE, handle)
            await asyncio.wait_for(
                self._drain_until_ack(handle),
                timeout=self._unsubscribe_deadline_s,
            )
        except TimeoutError as e:
            self._restore_after_drain()
            raise UnsubscribeError(
                f"{error_context}: no acknowledgment within "
                f"{self._unsubscribe_deadline_s * 1000:.0f}ms"
            ) from e
        except (ConnectionError, aiohttp.ClientError) as e:
            self._restore_after_drain()
            raise UnsubscribeError(f"{error_context}: {e}") from e
        except UnsubscribeError:
            self._restore_after_drain()
            raise

        self._state = StreamState.SUBSCRIBED if self._subscriptions else StreamState.CONNECTED
        logger.info(f"Unsubscribed from {handle.stream_name}")

    def _restore_after_drain(self) -> None:
        if self._state == StreamState.DRAINING:
            self._state = StreamState.SUBSCRIBED if self._subscriptions else StreamState.CONNECTED

    async def _drain_until_ack(self, handle: SubscriptionHandle) -> None:
        while True:
            msg = await self._receive()

            if msg.type == aiohttp.WSMsgType.PING:
                await self._pong(msg.data)
                continue

            if msg.type in _END_TYPES:
                self._state = StreamState.CLOSED
                raise UnsubscribeError(
                    f"Stream ended before unsubscribe of id {handle.stream_id} was acknowledged"
                )

            if msg.type not in _DATA_TYPES:
                continue

            try:
                data = orjson.loads(msg.data)
            except orjson.JSONDecodeError:
                continue

            if is_success_ack(data) and data.get("id", handle.stream_id) == handle.stream_id:
                return

    # =========================================================================
    # Context Manager
    # =========================================================================

    async def __aenter__(self) -> "ExchangeStream":
        await self.connect()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
