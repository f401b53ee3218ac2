"""
Decimal helpers for rates, budgets, amounts and hours

Money never passes through float arithmetic: inputs are converted via
str() and totals are rounded half-up to cents.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from freelance_market.kernel.errors import InvalidInput

CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str, field: str) -> Decimal:
    """
    Convert user input to Decimal

    Floats go through str() so 75.5 becomes Decimal("75.5"), not its
    binary expansion.

    Raises:
        InvalidInput: If value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInput(f"{field} must be a number, got '{value}'") from None
    if not result.is_finite():
        raise InvalidInput(f"{field} must be a finite number")
    return result


def round_currency(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, halves away from zero"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
