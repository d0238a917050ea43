import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models
from django.db.models import F, Q


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("locations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sku", models.CharField(db_index=True, max_length=128, unique=True)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("cost_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("warranty_months", models.PositiveIntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ProductInventory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.IntegerField(default=0)),
                ("reserved_quantity", models.IntegerField(default=0)),
                ("available_quantity", models.IntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventory_rows",
                        to="locations.location",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inventory_rows",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "product inventory",
                "ordering": ["product_id", "location_id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("product", "location"),
                        name="uniq_inventory_product_location",
                    ),
                    models.CheckConstraint(
                        condition=Q(reserved_quantity__gte=0),
                        name="inventory_reserved_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=Q(quantity__gte=F("reserved_quantity")),
                        name="inventory_quantity_covers_reserved",
                    ),
                    models.CheckConstraint(
                        condition=Q(available_quantity__gte=0),
                        name="inventory_available_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "movement_type",
                    models.CharField(
                        choices=[
                            ("SALE_OUT", "Sale"),
                            ("RETURN_IN", "Refund Return"),
                            ("CANCEL_RESTORE", "Cancellation Restore"),
                        ],
                        max_length=20,
                    ),
                ),
                ("quantity", models.PositiveIntegerField()),
                ("quantity_before", models.IntegerField()),
                ("quantity_after", models.IntegerField()),
                (
                    "reference_kind",
                    models.CharField(
                        choices=[("SALE", "Sale"), ("SALE_REFUND", "Sale Refund")],
                        max_length=20,
                    ),
                ),
                ("reference_id", models.CharField(db_index=True, max_length=64)),
                ("note", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="locations.location",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_movements",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["product", "location", "id"], name="movement_row_replay_idx"),
                    models.Index(fields=["reference_kind", "reference_id"], name="movement_reference_idx"),
                    models.Index(fields=["movement_type"], name="movement_type_idx"),
                ],
            },
        ),
    ]
