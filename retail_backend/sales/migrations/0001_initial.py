import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

PAYMENT_METHODS = [
    ("CASH", "Cash"),
    ("CARD", "Card"),
    ("BANK_TRANSFER", "Bank Transfer"),
    ("MOBILE_PAYMENT", "Mobile Payment"),
    ("CHECK", "Check"),
    ("OTHER", "Other"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        ("locations", "0001_initial"),
        ("products", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SequenceCounter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("scope", models.CharField(max_length=64, unique=True)),
                ("last_value", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["scope"],
            },
        ),
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "sale_number",
                    models.CharField(
                        help_text="System-generated sale number (SALE-<year>-<seq>)",
                        max_length=32,
                        unique=True,
                    ),
                ),
                ("customer_name", models.CharField(blank=True, max_length=255)),
                ("customer_phone", models.CharField(blank=True, max_length=50)),
                ("customer_email", models.EmailField(blank=True, max_length=254)),
                (
                    "sale_type",
                    models.CharField(
                        choices=[
                            ("POS", "Point of Sale"),
                            ("DIRECT", "Direct"),
                            ("ONLINE", "Online"),
                            ("PHONE", "Phone Order"),
                            ("WHOLESALE", "Wholesale"),
                        ],
                        default="POS",
                        max_length=16,
                    ),
                ),
                ("sale_channel", models.CharField(default="POS", max_length=32)),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "discount_type",
                    models.CharField(
                        blank=True,
                        choices=[("PERCENTAGE", "Percentage"), ("FIXED", "Fixed Amount")],
                        max_length=16,
                        null=True,
                    ),
                ),
                ("discount_reason", models.CharField(blank=True, max_length=255)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("paid_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("balance_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PARTIAL", "Partial"),
                            ("COMPLETED", "Completed"),
                            ("REFUNDED", "Refunded"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("payment_method", models.CharField(blank=True, max_length=32)),
                ("payment_reference", models.CharField(blank=True, max_length=128)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Draft"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                            ("REFUNDED", "Refunded"),
                            ("PARTIAL_REFUND", "Partially Refunded"),
                        ],
                        default="COMPLETED",
                        max_length=16,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("sale_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "cancelled_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cancelled_sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sales",
                        to="customers.customer",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="locations.location",
                    ),
                ),
                (
                    "sold_by",
                    models.ForeignKey(
                        help_text="Cashier / staff who processed the sale",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-sale_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["sale_date"], name="sale_date_idx"),
                    models.Index(fields=["status"], name="sale_status_idx"),
                    models.Index(fields=["payment_status"], name="sale_payment_status_idx"),
                    models.Index(fields=["location", "sale_date"], name="sale_location_date_idx"),
                    models.Index(fields=["customer_phone"], name="sale_customer_phone_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("product_name", models.CharField(max_length=255)),
                ("product_sku", models.CharField(blank=True, max_length=128)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "cost_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Product cost at time of sale (snapshot).",
                        max_digits=12,
                    ),
                ),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("subtotal", models.DecimalField(decimal_places=2, editable=False, max_digits=12)),
                ("warranty_months", models.PositiveIntegerField(default=0)),
                ("warranty_expiry", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "product",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sale_items",
                        to="products.product",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["sale", "created_at"], name="saleitem_sale_created_idx"),
                    models.Index(fields=["product", "created_at"], name="saleitem_product_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SalePayment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("payment_number", models.CharField(max_length=64, unique=True)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("method", models.CharField(choices=PAYMENT_METHODS, max_length=20)),
                ("reference_number", models.CharField(blank=True, max_length=128)),
                (
                    "status",
                    models.CharField(
                        choices=[("COMPLETED", "Completed"), ("PENDING", "Pending"), ("FAILED", "Failed")],
                        default="COMPLETED",
                        max_length=16,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("payment_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "received_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="received_sale_payments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["payment_date", "created_at"],
                "indexes": [
                    models.Index(fields=["sale", "payment_date"], name="salepayment_sale_date_idx"),
                    models.Index(fields=["method"], name="salepayment_method_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleRefund",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "refund_number",
                    models.CharField(help_text="REF-<year>-<epoch millis>", max_length=64, unique=True),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("reason", models.TextField()),
                ("refund_method", models.CharField(choices=PAYMENT_METHODS, max_length=20)),
                ("refunded_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "processed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="processed_sale_refunds",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="refunds",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["refunded_at"],
                "indexes": [
                    models.Index(fields=["sale", "refunded_at"], name="salerefund_sale_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleRefundItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("stock_restored", models.BooleanField(default=False)),
                (
                    "product",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="refund_items",
                        to="products.product",
                    ),
                ),
                (
                    "refund",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.salerefund",
                    ),
                ),
                (
                    "sale_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="refund_items",
                        to="sales.saleitem",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
