"""
Unit tests for Settings.

Tests defaults, normalization, validation and command-line loading.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from oraclearb.config.constants import BINANCE_WS_TESTNET_URL, BINANCE_WS_URL, PYTH_SOL_USD_FEED_ID
from oraclearb.config.settings import Settings, load_settings


FEED_HEX = "ef0d8b6fda2ceba41da15d4095d1da392a0d2f8ed0c6c7bc0f4cfac8c280b56d"


def make_settings(**kwargs: object) -> Settings:
    return Settings(_env_file=None, **kwargs)  # type: ignore[arg-type]


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BINANCE_TICKER", raising=False)
        monkeypatch.delenv("PYTH_PRICE_ID", raising=False)

        settings = make_settings()

        assert settings.binance_ticker == "solusdt"
        assert settings.pyth_price_id == PYTH_SOL_USD_FEED_ID
        assert settings.taker_fee is None
        assert settings.oracle_poll_interval_s == 0.0
        assert settings.detection_interval_s == 0.0
        assert settings.exchange_ws_url == BINANCE_WS_URL
        assert settings.emit_json is False

    def test_ticker_normalized(self) -> None:
        assert make_settings(binance_ticker=" SOLUSDT ").binance_ticker == "solusdt"

    @pytest.mark.parametrize("ticker", ["sol-usdt", "sol/usdt", ""])
    def test_invalid_ticker(self, ticker: str) -> None:
        with pytest.raises(ValidationError):
            make_settings(binance_ticker=ticker)

    def test_price_id_gets_prefix(self) -> None:
        assert make_settings(pyth_price_id=FEED_HEX.upper()).pyth_price_id == f"0x{FEED_HEX}"

    @pytest.mark.parametrize("price_id", ["0x1234", "zz" * 32, ""])
    def test_invalid_price_id(self, price_id: str) -> None:
        with pytest.raises(ValidationError):
            make_settings(pyth_price_id=price_id)

    def test_taker_fee_override(self) -> None:
        assert make_settings(taker_fee="0.0005").taker_fee == Decimal("0.0005")

    @pytest.mark.parametrize("fee", ["-0.001", "0.02"])
    def test_taker_fee_range(self, fee: str) -> None:
        with pytest.raises(ValidationError):
            make_settings(taker_fee=fee)

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(oracle_poll_interval_s=-1)

    def test_testnet_url(self) -> None:
        assert make_settings(use_testnet=True).exchange_ws_url == BINANCE_WS_TESTNET_URL

    def test_hermes_url_trailing_slash(self) -> None:
        assert make_settings(hermes_url="https://hermes.test/").hermes_url == "https://hermes.test"

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BINANCE_TICKER", "ETHUSDT")

        assert make_settings().binance_ticker == "ethusdt"


class TestLoadSettings:
    """Tests for load_settings."""

    def test_without_arguments(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BINANCE_TICKER", raising=False)
        monkeypatch.chdir("/")

        assert load_settings().binance_ticker == "solusdt"

    def test_command_line(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir("/")

        settings = load_settings(
            ["--binance_ticker", "SOLBNB", "--pyth_price_id", FEED_HEX]
        )

        assert settings.binance_ticker == "solbnb"
        assert settings.pyth_price_id == f"0x{FEED_HEX}"
