# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale, SalePayment
from sales.serializers.refund_read import SaleRefundReadSerializer
from sales.serializers.sale_item import SaleItemSerializer


class SalePaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalePayment
        fields = [
            "id",
            "payment_number",
            "amount",
            "method",
            "reference_number",
            "status",
            "received_by",
            "notes",
            "payment_date",
        ]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    """
    CANONICAL SALE SERIALIZER (READ-ONLY)

    Full sale with items, payments and refunds. Used by list, detail and
    every command response that returns a sale.

    balance_amount = paid_amount - total_amount
    (positive = change owed, negative = customer owes)
    """

    location_name = serializers.CharField(source="location.name", read_only=True)
    sold_by_name = serializers.SerializerMethodField()

    items = SaleItemSerializer(many=True, read_only=True)
    payments = SalePaymentSerializer(many=True, read_only=True)
    refunds = SaleRefundReadSerializer(many=True, read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "customer",
            "customer_name",
            "customer_phone",
            "customer_email",
            "location",
            "location_name",
            "sold_by",
            "sold_by_name",
            "sale_type",
            "sale_channel",
            "subtotal",
            "discount_amount",
            "discount_type",
            "discount_reason",
            "tax_amount",
            "tax_rate",
            "total_amount",
            "paid_amount",
            "balance_amount",
            "payment_status",
            "payment_method",
            "payment_reference",
            "status",
            "notes",
            "sale_date",
            "cancelled_at",
            "cancelled_by",
            "created_at",
            "updated_at",
            "items",
            "payments",
            "refunds",
        ]
        read_only_fields = fields

    def get_sold_by_name(self, obj):
        return getattr(obj.sold_by, "display_name", None)
