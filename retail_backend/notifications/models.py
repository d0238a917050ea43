# notifications/models.py

"""
NOTIFICATION RECORD

One row per (event, recipient, channel). Delivery outcome is written
back onto the row (SENT / FAILED + error_message).

parent is an optional back-reference to an earlier notification in the
same thread (e.g. a cancellation pointing at the sale-created notice).
It is SET_NULL so threads never own each other.
"""

import uuid

from django.conf import settings
from django.db import models


class Notification(models.Model):
    class EventType(models.TextChoices):
        SALE_CREATED = "SALE_CREATED", "Sale Created"
        SALE_CANCELLED = "SALE_CANCELLED", "Sale Cancelled"

    class RecipientType(models.TextChoices):
        CUSTOMER = "CUSTOMER", "Customer"
        ADMIN = "ADMIN", "Admin"
        MANAGER = "MANAGER", "Manager"

    class Channel(models.TextChoices):
        SMS = "SMS", "SMS"
        IN_APP = "IN_APP", "In-App"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        SENT = "SENT", "Sent"
        FAILED = "FAILED", "Failed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    event_type = models.CharField(max_length=32, choices=EventType.choices)
    recipient_type = models.CharField(max_length=16, choices=RecipientType.choices)
    channel = models.CharField(max_length=16, choices=Channel.choices)

    recipient_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    recipient_customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )
    recipient_address = models.CharField(
        max_length=255, blank=True, help_text="Phone number for SMS notifications"
    )

    title = models.CharField(max_length=255)
    message = models.TextField()

    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.PENDING
    )
    error_message = models.TextField(blank=True)

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )
    location = models.ForeignKey(
        "locations.Location",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )

    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="replies",
    )

    is_read = models.BooleanField(default=False)
    sent_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["sale", "event_type"], name="notif_sale_event_idx"),
            models.Index(fields=["recipient_user", "is_read"], name="notif_user_read_idx"),
            models.Index(fields=["status"], name="notif_status_idx"),
        ]

    def __str__(self):
        return f"{self.event_type} -> {self.recipient_type} ({self.status})"
