# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    Represents a point-of-sale transaction header.

    GUARANTEES:
    - sale_number is unique (SALE-<year>-<seq>)
    - Financial breakdown is frozen once created
    - paid / balance / payment_status move only through sales.services.payment_service
    - status moves only along sales.services.sale_lifecycle transitions
    - balance = paid - total (positive = change owed, negative = customer owes)
    """

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"
        REFUNDED = "REFUNDED", "Refunded"
        PARTIAL_REFUND = "PARTIAL_REFUND", "Partially Refunded"

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", "Pending"
        PARTIAL = "PARTIAL", "Partial"
        COMPLETED = "COMPLETED", "Completed"
        REFUNDED = "REFUNDED", "Refunded"

    class SaleType(models.TextChoices):
        POS = "POS", "Point of Sale"
        DIRECT = "DIRECT", "Direct"
        ONLINE = "ONLINE", "Online"
        PHONE = "PHONE", "Phone Order"
        WHOLESALE = "WHOLESALE", "Wholesale"

    class DiscountType(models.TextChoices):
        PERCENTAGE = "PERCENTAGE", "Percentage"
        FIXED = "FIXED", "Fixed Amount"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale_number = models.CharField(
        max_length=32,
        unique=True,
        help_text="System-generated sale number (SALE-<year>-<seq>)",
    )

    # Customer reference + snapshot (receipt stays stable if customer changes)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
    )
    customer_name = models.CharField(max_length=255, blank=True)
    customer_phone = models.CharField(max_length=50, blank=True)
    customer_email = models.EmailField(blank=True)

    location = models.ForeignKey(
        "locations.Location",
        on_delete=models.PROTECT,
        related_name="sales",
    )

    sold_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name="sales",
        help_text="Cashier / staff who processed the sale",
    )

    sale_type = models.CharField(
        max_length=16, choices=SaleType.choices, default=SaleType.POS
    )
    sale_channel = models.CharField(max_length=32, default="POS")

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount_type = models.CharField(
        max_length=16, choices=DiscountType.choices, null=True, blank=True
    )
    discount_reason = models.CharField(max_length=255, blank=True)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    balance_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    payment_status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    # Legacy header fields (first payment at checkout)
    payment_method = models.CharField(max_length=32, blank=True)
    payment_reference = models.CharField(max_length=128, blank=True)

    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.COMPLETED
    )

    notes = models.TextField(blank=True)

    sale_date = models.DateTimeField(default=timezone.now)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cancelled_sales",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-sale_date", "-created_at"]
        indexes = [
            models.Index(fields=["sale_date"], name="sale_date_idx"),
            models.Index(fields=["status"], name="sale_status_idx"),
            models.Index(fields=["payment_status"], name="sale_payment_status_idx"),
            models.Index(fields=["location", "sale_date"], name="sale_location_date_idx"),
            models.Index(fields=["customer_phone"], name="sale_customer_phone_idx"),
        ]

    _IMMUTABLE_FIELDS = (
        "sale_number",
        "location_id",
        "sold_by_id",
        "subtotal",
        "discount_amount",
        "tax_amount",
        "total_amount",
        "sale_date",
    )

    def _validate_update(self, previous: "Sale"):
        # Local import: the lifecycle module imports this model.
        from sales.services.sale_lifecycle import can_transition

        if self.status != previous.status and not can_transition(
            from_status=previous.status, to_status=self.status
        ):
            raise ValidationError(
                f"Sale status change {previous.status} -> {self.status} is not allowed."
            )

        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValidationError(f"Sale field '{field}' cannot be changed.")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = Sale.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_update(previous)

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Sales cannot be deleted; cancel or refund instead")

    def __str__(self):
        return f"{self.sale_number} | {self.total_amount}"
