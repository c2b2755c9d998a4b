"""
Exact decimal helpers for price and profit calculations.

Exchange prices arrive as decimal strings and oracle prices as integer
mantissas with a power-of-ten exponent; both are kept as `Decimal` so
that comparisons at the profitability boundary are exact.
"""

from decimal import ROUND_HALF_EVEN, Decimal, localcontext

from oraclearb.config.constants import PROFIT_DECIMAL_PLACES, PROFIT_QUANTUM


def scale_mantissa(mantissa: int, exponent: int) -> Decimal:
    """
    Compute ``mantissa * 10**exponent`` without rounding.

    Example:
        >>> scale_mantissa(69852445, -6)
        Decimal('69.852445')
    """
    return Decimal(mantissa).scaleb(exponent)


def round_profit(value: Decimal) -> Decimal:
    """
    Round a profit to 8 fractional digits.

    Uses round-half-even, the default rounding of Python's decimal
    context.

    Example:
        >>> round_profit(Decimal("0.034001757468"))
        Decimal('0.03400176')
    """
    with localcontext() as ctx:
        # Room for the integer digits plus the fixed fractional part
        ctx.prec = max(ctx.prec, value.adjusted() + 1 + PROFIT_DECIMAL_PLACES)
        return value.quantize(PROFIT_QUANTUM, rounding=ROUND_HALF_EVEN)
