from .refund_command import SaleRefundCommandSerializer
from .refund_read import SaleRefundReadSerializer
from .sale import SalePaymentSerializer, SaleSerializer
from .sale_command import (
    PaymentCreateSerializer,
    SaleCancelSerializer,
    SaleCreateSerializer,
)
from .sale_item import SaleItemSerializer

__all__ = [
    "SaleSerializer",
    "SaleItemSerializer",
    "SalePaymentSerializer",
    "SaleRefundReadSerializer",
    "SaleRefundCommandSerializer",
    "SaleCreateSerializer",
    "PaymentCreateSerializer",
    "SaleCancelSerializer",
]
