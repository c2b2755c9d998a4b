"""
Unit tests for the taker fee schedule.
"""

from decimal import Decimal

import pytest

from oraclearb.strategy.fees import resolve_taker_fee, taker_fee_for_symbol


class TestTakerFee:
    """Tests for fee resolution."""

    @pytest.mark.parametrize(
        "symbol,expected",
        [
            ("solusdt", Decimal("0.001")),
            ("SOLUSDT", Decimal("0.001")),
            ("btcfdusd", Decimal("0.001")),
            ("solbnb", Decimal("0.00075")),
            ("SOLBNB", Decimal("0.00075")),
            ("bnbusdt", Decimal("0.001")),
        ],
    )
    def test_fee_by_symbol(self, symbol: str, expected: Decimal) -> None:
        assert taker_fee_for_symbol(symbol) == expected

    def test_override_wins(self) -> None:
        assert resolve_taker_fee("solbnb", Decimal("0.0002")) == Decimal("0.0002")

    def test_zero_override_is_respected(self) -> None:
        """Test a zero-fee override is not mistaken for unset."""
        assert resolve_taker_fee("solusdt", Decimal("0")) == Decimal("0")

    def test_no_override(self) -> None:
        assert resolve_taker_fee("solusdt") == Decimal("0.001")
