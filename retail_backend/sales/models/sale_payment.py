# sales/models/sale_payment.py

"""
SALE PAYMENT (APPEND-ONLY)

One row per tender received against a sale: the initial payments taken
at checkout and any later installments.

Rules:
- payment_number = PAY-<sale_number>-<n>, n counting from 1 per sale
- method is a closed set (see sales.services.payment_methods)
- never updated or deleted; corrections are refunds
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .sale import Sale

User = settings.AUTH_USER_MODEL


class SalePayment(models.Model):
    class Method(models.TextChoices):
        CASH = "CASH", "Cash"
        CARD = "CARD", "Card"
        BANK_TRANSFER = "BANK_TRANSFER", "Bank Transfer"
        MOBILE_PAYMENT = "MOBILE_PAYMENT", "Mobile Payment"
        CHECK = "CHECK", "Check"
        OTHER = "OTHER", "Other"

    class Status(models.TextChoices):
        COMPLETED = "COMPLETED", "Completed"
        PENDING = "PENDING", "Pending"
        FAILED = "FAILED", "Failed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(Sale, on_delete=models.PROTECT, related_name="payments")

    payment_number = models.CharField(max_length=64, unique=True)

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=20, choices=Method.choices)
    reference_number = models.CharField(max_length=128, blank=True)

    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.COMPLETED
    )

    received_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="received_sale_payments",
    )

    notes = models.TextField(blank=True)

    payment_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["payment_date", "created_at"]
        indexes = [
            models.Index(fields=["sale", "payment_date"], name="salepayment_sale_date_idx"),
            models.Index(fields=["method"], name="salepayment_method_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SalePayment records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SalePayment records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.payment_number} | {self.method} | {self.amount}"
