"""
Exception hierarchy for the spread monitor.

Stream errors and oracle errors are separated so that each producer
loop can catch exactly the failures it is allowed to recover from.
"""


class OracleArbError(Exception):
    """Base exception for all monitor errors."""


# =============================================================================
# Exchange Stream
# =============================================================================


class StreamError(OracleArbError):
    """Base exception for exchange stream errors."""


class ConnectError(StreamError):
    """WebSocket handshake failed."""


class SubscribeRejected(StreamError):
    """The exchange did not acknowledge a subscription."""


class UnsubscribeError(StreamError):
    """Unsubscribe was not acknowledged before the deadline."""


class DecodeError(StreamError):
    """A data frame violated the feed contract."""

    def __init__(self, message: str, payload: str | bytes | None = None) -> None:
        super().__init__(message)
        self.payload = payload


# =============================================================================
# Oracle
# =============================================================================


class OracleError(OracleArbError):
    """Base exception for oracle errors."""


class OracleSourceError(OracleError):
    """The oracle collaborator failed to produce a reading."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class OracleUnavailableError(OracleError):
    """No reading could be fetched this iteration."""


class StaleDataError(OracleError):
    """The latest reading is older than the staleness window."""

    def __init__(self, message: str, age_s: int) -> None:
        super().__init__(message)
        self.age_s = age_s
