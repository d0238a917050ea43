# sales/services/payment_methods.py

"""
PAYMENT METHOD NORMALIZATION

Free-text tender names from clients are mapped onto the closed
SalePayment.Method set before anything is persisted.
"""

from __future__ import annotations

from sales.models import SalePayment
from sales.services.exceptions import ValidationError

_ALIASES = {
    "CASH": SalePayment.Method.CASH,
    "CARD": SalePayment.Method.CARD,
    "CREDIT_CARD": SalePayment.Method.CARD,
    "DEBIT_CARD": SalePayment.Method.CARD,
    "BANK_TRANSFER": SalePayment.Method.BANK_TRANSFER,
    "BANK": SalePayment.Method.BANK_TRANSFER,
    "TRANSFER": SalePayment.Method.BANK_TRANSFER,
    "MOBILE_PAYMENT": SalePayment.Method.MOBILE_PAYMENT,
    "MOBILE_MONEY": SalePayment.Method.MOBILE_PAYMENT,
    "MOBILE": SalePayment.Method.MOBILE_PAYMENT,
    "CHECK": SalePayment.Method.CHECK,
    "CHEQUE": SalePayment.Method.CHECK,
    "OTHER": SalePayment.Method.OTHER,
}


def normalize_payment_method(method) -> str:
    """
    Case-insensitive; spaces and dashes count as underscores
    ("bank transfer", "Mobile-Money"). Unknown values are rejected.
    """
    if method is None or not str(method).strip():
        raise ValidationError("Payment method is required")

    key = str(method).strip().upper().replace("-", "_").replace(" ", "_")
    normalized = _ALIASES.get(key)
    if normalized is None:
        raise ValidationError(
            f"Invalid payment method: {method}",
            details={"allowed": sorted(SalePayment.Method.values)},
        )
    return str(normalized.value)
