"""Configuration module for the spread monitor."""

from oraclearb.config.constants import (
    BINANCE_WS_URL,
    CONFIDENCE_95_MULTIPLIER,
    DEFAULT_TAKER_FEE,
    ORACLE_MAX_AGE_S,
    UNSUBSCRIBE_DEADLINE_S,
)
from oraclearb.config.settings import Settings, load_settings


__all__ = [
    "Settings",
    "load_settings",
    "BINANCE_WS_URL",
    "CONFIDENCE_95_MULTIPLIER",
    "DEFAULT_TAKER_FEE",
    "ORACLE_MAX_AGE_S",
    "UNSUBSCRIBE_DEADLINE_S",
]
