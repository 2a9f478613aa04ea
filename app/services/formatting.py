from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

_CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a JSON amount (number or numeric string) into a ``Decimal``.

    Returns ``None`` for missing, boolean, non-numeric, non-finite input, or
    amounts too large to express in cents.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float, str)):
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not parsed.is_finite() or not fits_cents(parsed):
        return None
    return parsed


def fits_cents(value: Decimal) -> bool:
    """Whether ``value`` can be rounded to cents within the decimal context."""
    try:
        value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return False
    return True


def format_amount(amount: Decimal | float | int | str) -> str:
    """Render an amount with exactly two decimal places, rounding half up."""
    value = amount if isinstance(amount, Decimal) else to_decimal(amount)
    if value is None:
        raise ValueError(f"Not a numeric amount: {amount!r}")
    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))
