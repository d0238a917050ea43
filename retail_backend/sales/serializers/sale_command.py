# sales/serializers/sale_command.py

"""
Command serializers for sale creation, payments and cancellation.

They check request shape only. Money rules, stock and state checks live
in the services, which run them under row locks.
"""

from rest_framework import serializers

from sales.models import Sale


class SaleLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    tax = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    warranty_months = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class TenderInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    method = serializers.CharField(max_length=32)
    reference = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")


class SaleCreateSerializer(serializers.Serializer):
    location_id = serializers.UUIDField()
    customer_id = serializers.UUIDField(required=False, allow_null=True)
    customer_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")

    items = SaleLineInputSerializer(many=True, allow_empty=False)

    # New format: split tender. Legacy: paid_amount + payment_method.
    payments = TenderInputSerializer(many=True, required=False)
    paid_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    payment_method = serializers.CharField(max_length=32, required=False, allow_blank=True)
    payment_reference = serializers.CharField(
        max_length=128, required=False, allow_blank=True, default=""
    )

    discount_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    discount_type = serializers.ChoiceField(
        choices=Sale.DiscountType.choices, required=False, allow_null=True
    )
    discount_reason = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    tax_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, required=False, allow_null=True
    )

    sale_type = serializers.ChoiceField(
        choices=Sale.SaleType.choices, required=False, default=Sale.SaleType.POS
    )
    sale_channel = serializers.CharField(max_length=32, required=False, default="POS")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    method = serializers.CharField(max_length=32)
    reference = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class SaleCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)
