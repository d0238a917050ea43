# notifications/admin.py

from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = (
        "event_type",
        "recipient_type",
        "channel",
        "recipient_user",
        "recipient_address",
        "status",
        "created_at",
    )
    list_filter = ("event_type", "channel", "status")
    search_fields = ("title", "recipient_address", "sale__sale_number")
    readonly_fields = ("parent", "sale", "sent_at", "created_at")
