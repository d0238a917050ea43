from rest_framework import serializers

from sales.models import SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    """
    Sale line snapshot (read-only). Price, cost and name are as sold.
    """

    warranty_number = serializers.SerializerMethodField()

    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product",
            "product_name",
            "product_sku",
            "quantity",
            "unit_price",
            "cost_price",
            "discount_amount",
            "tax_amount",
            "subtotal",
            "warranty_months",
            "warranty_expiry",
            "warranty_number",
        ]
        read_only_fields = fields

    def get_warranty_number(self, obj):
        card = getattr(obj, "warranty_card", None)
        return getattr(card, "warranty_number", None)
