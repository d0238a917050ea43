# sales/admin.py

"""
Sales admin is an inspection surface only.

Sales, items, payments and refunds are created by the sale services so
stock movements and totals stay paired; nothing here adds or edits them.
"""

from django.contrib import admin

from sales.models import Sale, SaleItem, SalePayment, SaleRefund, SaleRefundItem, SequenceCounter


class ReadOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ======================================================
# SALE ADMIN
# ======================================================


class SaleItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SaleItem
    extra = 0
    fields = ("product_name", "product_sku", "quantity", "unit_price", "discount_amount", "tax_amount", "subtotal")
    readonly_fields = fields


class SalePaymentInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SalePayment
    extra = 0
    fields = ("payment_number", "amount", "method", "reference_number", "payment_date")
    readonly_fields = fields


@admin.register(Sale)
class SaleAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "sale_number",
        "location",
        "customer_name",
        "total_amount",
        "paid_amount",
        "balance_amount",
        "payment_status",
        "status",
        "sale_date",
    )
    list_filter = ("status", "payment_status", "location", "sale_date")
    search_fields = ("sale_number", "customer_name", "customer_phone")
    inlines = [SaleItemInline, SalePaymentInline]


# ======================================================
# REFUND ADMIN
# ======================================================


class SaleRefundItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SaleRefundItem
    extra = 0
    fields = ("sale_item", "product", "quantity", "stock_restored")
    readonly_fields = fields


@admin.register(SaleRefund)
class SaleRefundAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("refund_number", "sale", "amount", "refund_method", "processed_by", "refunded_at")
    search_fields = ("refund_number", "sale__sale_number")
    list_filter = ("refund_method",)
    inlines = [SaleRefundItemInline]


@admin.register(SequenceCounter)
class SequenceCounterAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("scope", "last_value", "updated_at")
