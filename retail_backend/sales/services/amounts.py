# sales/services/amounts.py

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from sales.services.exceptions import ValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def parse_money(value, *, field_name: str, default=None, positive: bool = False) -> Decimal:
    """
    Parse a caller-supplied amount. Negative values are always rejected;
    positive=True also rejects zero.
    """
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        value = default

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a valid amount")

    try:
        amount = money(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a valid amount") from None

    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a valid amount")
    if amount < ZERO:
        raise ValidationError(f"{field_name} cannot be negative")
    if positive and amount == ZERO:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def parse_quantity(value, *, field_name: str = "quantity") -> int:
    """
    HARD RULE: quantities are whole units >= 1.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole integer unit")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValidationError(f"{field_name} must be a whole integer unit")
    if value <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return value
