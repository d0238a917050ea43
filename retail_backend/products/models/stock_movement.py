# products/models/stock_movement.py

"""
CANONICAL INVENTORY LEDGER ENTRY

Immutable record of one inventory mutation.

GUARANTEES:
- Append-only (no updates, no deletes)
- quantity is the magnitude; direction comes from movement_type
- quantity_after == quantity_before + signed_quantity, and never negative
- Integer primary key gives a deterministic replay order
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        SALE_OUT = "SALE_OUT", "Sale"
        RETURN_IN = "RETURN_IN", "Refund Return"
        CANCEL_RESTORE = "CANCEL_RESTORE", "Cancellation Restore"

    class ReferenceKind(models.TextChoices):
        SALE = "SALE", "Sale"
        SALE_REFUND = "SALE_REFUND", "Sale Refund"

    OUTBOUND_TYPES = frozenset({MovementType.SALE_OUT.value})

    id = models.BigAutoField(primary_key=True)

    product = models.ForeignKey(
        "products.Product", on_delete=models.PROTECT, related_name="stock_movements"
    )
    location = models.ForeignKey(
        "locations.Location", on_delete=models.PROTECT, related_name="stock_movements"
    )

    movement_type = models.CharField(max_length=20, choices=MovementType.choices)

    quantity = models.PositiveIntegerField()
    quantity_before = models.IntegerField()
    quantity_after = models.IntegerField()

    reference_kind = models.CharField(max_length=20, choices=ReferenceKind.choices)
    reference_id = models.CharField(max_length=64, db_index=True)

    note = models.CharField(max_length=255, blank=True)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["product", "location", "id"], name="movement_row_replay_idx"),
            models.Index(fields=["reference_kind", "reference_id"], name="movement_reference_idx"),
            models.Index(fields=["movement_type"], name="movement_type_idx"),
        ]

    @property
    def signed_quantity(self) -> int:
        if self.movement_type in self.OUTBOUND_TYPES:
            return -int(self.quantity)
        return int(self.quantity)

    def clean(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValidationError("quantity must be greater than zero")

        if self.quantity_before is None or self.quantity_after is None:
            raise ValidationError("quantity_before and quantity_after are required")

        if self.quantity_after != self.quantity_before + self.signed_quantity:
            raise ValidationError(
                f"{self.movement_type} of {self.quantity} cannot move "
                f"{self.quantity_before} -> {self.quantity_after}"
            )

        if self.quantity_after < 0:
            raise ValidationError("quantity_after cannot be negative")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    def __str__(self):
        return f"{self.product_id} | {self.movement_type} | {self.quantity}"
