# sales/models/sale_refund.py

"""
SALE REFUND (APPEND-ONLY)

Purpose:
- Money returned against a sale (SaleRefund) and, optionally, the goods
  that came back with it (SaleRefundItem).
- sum(refund.amount) for a sale is bounded at the service layer.
- Refunds never edit the sale's paid/balance fields; reporting derives
  net revenue by subtracting refunds.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .sale import Sale
from .sale_payment import SalePayment

User = settings.AUTH_USER_MODEL


class SaleRefund(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(Sale, on_delete=models.PROTECT, related_name="refunds")

    refund_number = models.CharField(
        max_length=64,
        unique=True,
        help_text="REF-<year>-<epoch millis>",
    )

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    reason = models.TextField()
    refund_method = models.CharField(max_length=20, choices=SalePayment.Method.choices)

    processed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="processed_sale_refunds",
    )

    refunded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["refunded_at"]
        indexes = [
            models.Index(fields=["sale", "refunded_at"], name="salerefund_sale_date_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleRefund records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SaleRefund records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.refund_number} | {self.amount}"


class SaleRefundItem(models.Model):
    """
    Goods returned under one refund; each row restored stock to the
    sale's location with a RETURN_IN movement (when the row still existed).
    """

    refund = models.ForeignKey(SaleRefund, on_delete=models.CASCADE, related_name="items")
    sale_item = models.ForeignKey(
        "sales.SaleItem", on_delete=models.PROTECT, related_name="refund_items"
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        related_name="refund_items",
    )
    quantity = models.PositiveIntegerField()
    stock_restored = models.BooleanField(default=False)

    class Meta:
        ordering = ["id"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleRefundItem records are immutable")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.refund_id} | {self.product_id} x {self.quantity}"
