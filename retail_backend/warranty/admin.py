# warranty/admin.py

from django.contrib import admin

from .models import WarrantyCard


@admin.register(WarrantyCard)
class WarrantyCardAdmin(admin.ModelAdmin):
    list_display = (
        "warranty_number",
        "product_name",
        "customer_name",
        "customer_phone",
        "start_date",
        "expiry_date",
        "status",
    )
    list_filter = ("status", "location")
    search_fields = ("warranty_number", "product_name", "customer_name", "customer_phone")
    readonly_fields = ("warranty_number", "sale", "sale_item", "created_at", "updated_at")
