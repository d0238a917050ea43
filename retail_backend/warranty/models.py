# warranty/models.py

"""
WARRANTY CARD

One card per sold line item carrying warranty months > 0.

Notes:
- sale_item is one-to-one: the database rejects a second card for the
  same line, which is what makes issuance idempotent.
- Product / customer fields are snapshots taken at issue time.
"""

import uuid

from django.db import models
from django.utils import timezone

DEFAULT_COVERAGE = (
    "Manufacturing defects, hardware failures, and software issues under normal use."
)
DEFAULT_EXCLUSIONS = (
    "Physical damage, water damage, unauthorized repairs, misuse, and normal wear and tear."
)


def default_terms(months: int) -> str:
    return (
        f"This warranty covers manufacturing defects for {months} months "
        "from the date of purchase."
    )


class WarrantyCard(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "Active"
        EXPIRED = "EXPIRED", "Expired"
        VOIDED = "VOIDED", "Voided"
        CLAIMED = "CLAIMED", "Claimed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    warranty_number = models.CharField(max_length=32, unique=True)

    sale = models.ForeignKey(
        "sales.Sale", on_delete=models.PROTECT, related_name="warranty_cards"
    )
    sale_item = models.OneToOneField(
        "sales.SaleItem", on_delete=models.PROTECT, related_name="warranty_card"
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        related_name="warranty_cards",
    )
    location = models.ForeignKey(
        "locations.Location", on_delete=models.PROTECT, related_name="warranty_cards"
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="warranty_cards",
    )

    product_name = models.CharField(max_length=255)
    product_sku = models.CharField(max_length=128, blank=True)
    serial_number = models.CharField(max_length=128, blank=True)

    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=50, blank=True)
    customer_email = models.EmailField(blank=True)

    warranty_months = models.PositiveIntegerField()
    start_date = models.DateField()
    expiry_date = models.DateField(db_index=True)

    terms = models.TextField(blank=True)
    coverage = models.TextField(blank=True)
    exclusions = models.TextField(blank=True)

    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.ACTIVE, db_index=True
    )
    activated_at = models.DateTimeField(default=timezone.now)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer_phone"], name="warranty_customer_phone_idx"),
        ]

    def __str__(self):
        return f"{self.warranty_number} | {self.product_name}"
