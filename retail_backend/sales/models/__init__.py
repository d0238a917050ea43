# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS

Purpose:
- Central export surface for sales app models.
"""

from .sale import Sale
from .sale_item import SaleItem
from .sale_payment import SalePayment
from .sale_refund import SaleRefund, SaleRefundItem
from .sequence import SequenceCounter

__all__ = [
    "Sale",
    "SaleItem",
    "SalePayment",
    "SaleRefund",
    "SaleRefundItem",
    "SequenceCounter",
]
