# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable product (device, accessory, spare part).

    STOCK MODEL (IMPORTANT):
    - Product itself does NOT store stock
    - Stock lives in ProductInventory, one row per (product, location)
    - unit_price / cost_price are current defaults; sales snapshot them per line
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=128, unique=True, db_index=True)
    name = models.CharField(max_length=255, db_index=True)

    cost_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    # Default warranty for this product; 0 = no warranty card issued
    warranty_months = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def clean(self):
        if self.unit_price is None or Decimal(self.unit_price) < 0:
            raise ValidationError("unit_price cannot be negative")
        if self.cost_price is None or Decimal(self.cost_price) < 0:
            raise ValidationError("cost_price cannot be negative")
