import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        ("locations", "0001_initial"),
        ("products", "0001_initial"),
        ("sales", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WarrantyCard",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("warranty_number", models.CharField(max_length=32, unique=True)),
                ("product_name", models.CharField(max_length=255)),
                ("product_sku", models.CharField(blank=True, max_length=128)),
                ("serial_number", models.CharField(blank=True, max_length=128)),
                ("customer_name", models.CharField(max_length=255)),
                ("customer_phone", models.CharField(blank=True, max_length=50)),
                ("customer_email", models.EmailField(blank=True, max_length=254)),
                ("warranty_months", models.PositiveIntegerField()),
                ("start_date", models.DateField()),
                ("expiry_date", models.DateField(db_index=True)),
                ("terms", models.TextField(blank=True)),
                ("coverage", models.TextField(blank=True)),
                ("exclusions", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("ACTIVE", "Active"),
                            ("EXPIRED", "Expired"),
                            ("VOIDED", "Voided"),
                            ("CLAIMED", "Claimed"),
                        ],
                        db_index=True,
                        default="ACTIVE",
                        max_length=16,
                    ),
                ),
                ("activated_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="warranty_cards",
                        to="customers.customer",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="warranty_cards",
                        to="locations.location",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="warranty_cards",
                        to="products.product",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="warranty_cards",
                        to="sales.sale",
                    ),
                ),
                (
                    "sale_item",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="warranty_card",
                        to="sales.saleitem",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["customer_phone"], name="warranty_customer_phone_idx"),
                ],
            },
        ),
    ]
