"""
Monitor constants and configuration values.

This module contains all hardcoded values used throughout the monitor.
Values are organized by category for easy maintenance and auditing.
"""

from decimal import Decimal
from typing import Final


# =============================================================================
# Binance Streaming Endpoints
# =============================================================================

BINANCE_WS_URL: Final[str] = "wss://stream.binance.com:9443/stream"
BINANCE_WS_TESTNET_URL: Final[str] = "wss://testnet.binance.vision/stream"

# Stream suffix for best bid/ask updates
BOOK_TICKER_STREAM: Final[str] = "bookTicker"

# Protocol methods
METHOD_SUBSCRIBE: Final[str] = "SUBSCRIBE"
METHOD_UNSUBSCRIBE: Final[str] = "UNSUBSCRIBE"


# =============================================================================
# Pyth Oracle
# =============================================================================

PYTH_HERMES_URL: Final[str] = "https://hermes.pyth.network"
ENDPOINT_LATEST_PRICE: Final[str] = "/v2/updates/price/latest"

# Pyth SOL/USD price feed
PYTH_SOL_USD_FEED_ID: Final[str] = (
    "0xef0d8b6fda2ceba41da15d4095d1da392a0d2f8ed0c6c7bc0f4cfac8c280b56d"
)

# Readings older than this are never used
ORACLE_MAX_AGE_S: Final[int] = 60

DEFAULT_ORACLE_REQUEST_TIMEOUT_S: Final[float] = 5.0


# =============================================================================
# Trading Fees
# =============================================================================

# Default Binance spot taker fee (0.1%)
DEFAULT_TAKER_FEE: Final[Decimal] = Decimal("0.001")

# Taker fee for pairs quoted in the native token (25% off)
NATIVE_TOKEN_TAKER_FEE: Final[Decimal] = Decimal("0.00075")
NATIVE_TOKEN: Final[str] = "bnb"


# =============================================================================
# Detection
# =============================================================================

# 95% bound of a Laplace-distributed confidence model
# https://docs.pyth.network/price-feeds/best-practices#confidence-intervals
CONFIDENCE_95_MULTIPLIER: Final[Decimal] = Decimal("2.12")

PROFIT_DECIMAL_PLACES: Final[int] = 8
PROFIT_QUANTUM: Final[Decimal] = Decimal(1).scaleb(-PROFIT_DECIMAL_PLACES)


# =============================================================================
# WebSocket Configuration
# =============================================================================

WS_MAX_MESSAGE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB

# Soft deadline for the unsubscribe acknowledgment during shutdown
UNSUBSCRIBE_DEADLINE_S: Final[float] = 0.3

# Acknowledgment marker for SUBSCRIBE/UNSUBSCRIBE requests
ACK_RESULT_KEY: Final[str] = "result"


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000

# Samples kept per latency metric
LATENCY_WINDOW_SIZE: Final[int] = 1000
