# sales/serializers/refund_read.py

from rest_framework import serializers

from sales.models import SaleRefund, SaleRefundItem


class SaleRefundItemReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleRefundItem
        fields = ["id", "sale_item", "product", "quantity", "stock_restored"]
        read_only_fields = fields


class SaleRefundReadSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for refund records.

    Used for:
    - Sale detail views
    - The createRefund response
    """

    items = SaleRefundItemReadSerializer(many=True, read_only=True)

    class Meta:
        model = SaleRefund
        fields = [
            "id",
            "sale",
            "refund_number",
            "amount",
            "reason",
            "refund_method",
            "processed_by",
            "refunded_at",
            "items",
        ]
        read_only_fields = fields
