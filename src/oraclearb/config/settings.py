"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading, command-line overrides and validation.
"""

import re
from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oraclearb.config.constants import (
    BINANCE_WS_TESTNET_URL,
    BINANCE_WS_URL,
    DEFAULT_ORACLE_REQUEST_TIMEOUT_S,
    PYTH_HERMES_URL,
    PYTH_SOL_USD_FEED_ID,
)


_TICKER_PATTERN = re.compile(r"^[a-z0-9]+$")
_FEED_ID_PATTERN = re.compile(r"^(0x)?[0-9a-f]{64}$")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or,
    when loaded through `load_settings`, command-line flags.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Market Selection
    # =========================================================================

    binance_ticker: str = Field(
        default="solusdt",
        description="Pair from the Binance spot market (e.g. solusdt)",
    )

    pyth_price_id: str = Field(
        default=PYTH_SOL_USD_FEED_ID,
        description="Pyth price feed id for the same pair",
    )

    # =========================================================================
    # Network Configuration
    # =========================================================================

    use_testnet: bool = Field(
        default=False,
        description="Use the Binance testnet stream instead of production",
    )

    hermes_url: str = Field(
        default=PYTH_HERMES_URL,
        description="Base URL of the Pyth Hermes price service",
    )

    oracle_request_timeout_s: float = Field(
        default=DEFAULT_ORACLE_REQUEST_TIMEOUT_S,
        gt=0.0,
        le=60.0,
        description="Timeout for a single oracle request in seconds",
    )

    # =========================================================================
    # Detection Configuration
    # =========================================================================

    taker_fee: Decimal | None = Field(
        default=None,
        ge=Decimal("0"),
        le=Decimal("0.01"),
        description="Taker fee override (e.g. 0.001 = 0.1%); derived from the pair when unset",
    )

    oracle_poll_interval_s: float = Field(
        default=0.0,
        ge=0.0,
        le=60.0,
        description="Pause between oracle polls; 0 polls as fast as responses arrive",
    )

    detection_interval_s: float = Field(
        default=0.0,
        ge=0.0,
        le=10.0,
        description="Pause between detection passes; 0 only yields to the event loop",
    )

    # =========================================================================
    # Operation Mode
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional file receiving DEBUG-level logs",
    )

    emit_json: bool = Field(
        default=False,
        description="Also log each opportunity and the final metrics as JSON lines",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("binance_ticker", mode="before")
    @classmethod
    def validate_ticker(cls, v: str) -> str:
        """Normalize the pair to Binance's lowercase stream form."""
        v = str(v).strip().lower()
        if not _TICKER_PATTERN.match(v):
            raise ValueError(f"Invalid Binance ticker: {v!r}")
        return v

    @field_validator("pyth_price_id", mode="before")
    @classmethod
    def validate_price_id(cls, v: str) -> str:
        """Ensure the feed id is a 32-byte hex string."""
        v = str(v).strip().lower()
        if not _FEED_ID_PATTERN.match(v):
            raise ValueError(f"Invalid Pyth price feed id: {v!r}")
        return v if v.startswith("0x") else f"0x{v}"

    @field_validator("hermes_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def exchange_ws_url(self) -> str:
        """Combined-stream endpoint for the selected network."""
        return BINANCE_WS_TESTNET_URL if self.use_testnet else BINANCE_WS_URL


def load_settings(argv: Sequence[str] | bool = False) -> Settings:
    """
    Load settings from the environment and optional command-line arguments.

    Args:
        argv: Arguments to parse (``True`` reads ``sys.argv``, ``False``
            disables command-line parsing).

    Returns:
        Validated settings.
    """
    if argv is False:
        return Settings()
    cli_args = argv if argv is True else list(argv)
    return Settings(_cli_parse_args=cli_args)  # type: ignore[call-arg]
