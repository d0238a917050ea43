# products/models/inventory.py

"""
INVENTORY ROW (per product, per location)

GUARANTEES:
- Exactly one row per (product, location)
- available_quantity = quantity - reserved_quantity, recomputed on every save
- available_quantity never negative (DB constraint)

Mutated ONLY through products.services.inventory_ledger; stocking flows
create rows, the sales core adjusts them.
"""

from django.db import models
from django.db.models import F, Q


class ProductInventory(models.Model):
    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="inventory_rows"
    )
    location = models.ForeignKey(
        "locations.Location", on_delete=models.PROTECT, related_name="inventory_rows"
    )

    quantity = models.IntegerField(default=0)
    reserved_quantity = models.IntegerField(default=0)
    available_quantity = models.IntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["product_id", "location_id"]
        verbose_name_plural = "product inventory"
        constraints = [
            models.UniqueConstraint(
                fields=["product", "location"],
                name="uniq_inventory_product_location",
            ),
            models.CheckConstraint(
                condition=Q(reserved_quantity__gte=0),
                name="inventory_reserved_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=F("reserved_quantity")),
                name="inventory_quantity_covers_reserved",
            ),
            models.CheckConstraint(
                condition=Q(available_quantity__gte=0),
                name="inventory_available_non_negative",
            ),
        ]

    def save(self, *args, **kwargs):
        self.available_quantity = int(self.quantity) - int(self.reserved_quantity)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "available_quantity", "updated_at"}
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_id} @ {self.location_id}: {self.available_quantity}"
