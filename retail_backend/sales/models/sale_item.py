# sales/models/sale_item.py

"""
SALE ITEM (IMMUTABLE SNAPSHOT)

Represents an immutable snapshot of a sold line item.

Notes:
- Price / cost / name are copied from the product at sale time, so later
  product edits never change historical sales.
- subtotal = unit_price * quantity - discount_amount + tax_amount
- Warranty cards link to a SaleItem from their side; the item itself is
  never updated after creation.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .sale import Sale


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        related_name="sale_items",
    )

    product_name = models.CharField(max_length=255)
    product_sku = models.CharField(max_length=128, blank=True)

    quantity = models.PositiveIntegerField()

    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Product cost at time of sale (snapshot).",
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, editable=False)

    warranty_months = models.PositiveIntegerField(default=0)
    warranty_expiry = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["sale", "created_at"], name="saleitem_sale_created_idx"),
            models.Index(fields=["product", "created_at"], name="saleitem_product_created_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleItem records are immutable")

        self.subtotal = (
            Decimal(self.unit_price) * Decimal(int(self.quantity or 0))
            - Decimal(self.discount_amount)
            + Decimal(self.tax_amount)
        )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SaleItem records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
