# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (audit-safe):

- Products are plain master data.
- Inventory rows are read-only here; quantities change only through the
  inventory ledger so every change has a StockMovement.
- StockMovement rows are immutable: no add, change or delete.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product, ProductInventory, StockMovement


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "unit_price", "cost_price", "warranty_months", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "sku")


@admin.register(ProductInventory)
class ProductInventoryAdmin(admin.ModelAdmin):
    list_display = ("product", "location", "quantity", "reserved_quantity", "available_quantity")
    list_filter = ("location",)
    search_fields = ("product__name", "product__sku")
    readonly_fields = ("available_quantity", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        # opening stock can be entered once; later changes go through the ledger
        if obj is not None:
            return ("product", "location", "quantity", "reserved_quantity", *self.readonly_fields)
        return self.readonly_fields


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "product",
        "location",
        "movement_type",
        "quantity",
        "quantity_before",
        "quantity_after",
        "reference_kind",
        "reference_id",
        "created_at",
    )
    list_filter = ("movement_type", "reference_kind", "location")
    search_fields = ("product__name", "reference_id", "note")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
