# sales/serializers/refund_command.py

from rest_framework import serializers


class RefundLineSerializer(serializers.Serializer):
    sale_item_id = serializers.UUIDField(required=False)
    product_id = serializers.UUIDField(required=False)
    quantity = serializers.IntegerField(min_value=1)

    def validate(self, attrs):
        if not attrs.get("sale_item_id") and not attrs.get("product_id"):
            raise serializers.ValidationError("Provide sale_item_id or product_id.")
        return attrs


class SaleRefundCommandSerializer(serializers.Serializer):
    """
    Command serializer for refund requests.

    This serializer does NOT touch the database.
    Amount bounds and per-line return ceilings are enforced by the
    refund service under the sale lock.
    """

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    reason = serializers.CharField(max_length=1000)
    method = serializers.CharField(max_length=32)
    items = RefundLineSerializer(many=True, required=False)
