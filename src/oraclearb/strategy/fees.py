"""Taker fee schedule derived from the traded pair."""

from decimal import Decimal

from oraclearb.config.constants import DEFAULT_TAKER_FEE, NATIVE_TOKEN, NATIVE_TOKEN_TAKER_FEE


def taker_fee_for_symbol(symbol: str) -> Decimal:
    """
    Get the taker fee for a Binance spot pair.

    Pairs quoted in the exchange's native token get the discounted tier.

    Args:
        symbol: Pair symbol in any case (e.g. "SOLBNB", "solusdt").

    Returns:
        Fee as a fraction of traded notional.

    Example:
        >>> taker_fee_for_symbol("solbnb")
        Decimal('0.00075')
        >>> taker_fee_for_symbol("solusdt")
        Decimal('0.001')
    """
    if symbol.lower().endswith(NATIVE_TOKEN):
        return NATIVE_TOKEN_TAKER_FEE
    return DEFAULT_TAKER_FEE


def resolve_taker_fee(symbol: str, override: Decimal | None = None) -> Decimal:
    """Use the configured override when present, else the pair's tier."""
    if override is not None:
        return override
    return taker_fee_for_symbol(symbol)
