"""
Display rounding for prices.

Presentation only: stored and computed prices are never rounded.

Rules:
- decimal part <= .50 rounds down
- decimal part >  .50 rounds up

    123.40 → 123
    123.50 → 123
    123.60 → 124
"""

from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Optional, Union

Number = Union[Decimal, int, float, str]


def _to_decimal(value: Number) -> Optional[Decimal]:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    return result


def round_display_price(price: Optional[Number]) -> int:
    """
    Round a price to a whole number for display.

    Invalid or negative input displays as 0.
    """
    if price is None:
        return 0

    value = _to_decimal(price)
    if value is None or value < 0:
        return 0

    whole = value.to_integral_value(rounding=ROUND_FLOOR)
    if value - whole <= Decimal("0.50"):
        return int(whole)
    return int(whole) + 1


def needs_rounding(price: Optional[Number]) -> bool:
    """True if the display value differs from the exact price."""
    value = _to_decimal(price) if price is not None else None
    if value is None:
        return False
    return value != round_display_price(value)
