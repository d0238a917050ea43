# products/tests/test_products.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase

from locations.models import Location
from products.models import Product, ProductInventory
from products.services.directory import ProductNotFound, get_product


class ProductModelTests(TestCase):
    """
    Product master data.

    GUARANTEES:
    - SKU uniqueness is enforced
    - Directory lookups fail loudly for unknown ids
    """

    def test_sku_must_be_unique(self):
        Product.objects.create(name="USB-C Cable", sku="CBL-USBC", unit_price=Decimal("9.99"))

        with self.assertRaises(IntegrityError):
            Product.objects.create(
                name="USB-C Cable (dup)", sku="CBL-USBC", unit_price=Decimal("10.99")
            )

    def test_negative_price_rejected_by_clean(self):
        product = Product(name="Broken", sku="BRK-1", unit_price=Decimal("-1.00"))
        with self.assertRaises(ValidationError):
            product.full_clean()

    def test_get_product_returns_live_record(self):
        product = Product.objects.create(
            name="Phone Case",
            sku="CASE-1",
            cost_price=Decimal("2.00"),
            unit_price=Decimal("5.00"),
            warranty_months=3,
        )
        found = get_product(product.id)
        self.assertEqual(found.pk, product.pk)
        self.assertEqual(found.warranty_months, 3)

    def test_get_product_unknown_and_malformed_ids(self):
        with self.assertRaises(ProductNotFound):
            get_product("00000000-0000-0000-0000-000000000000")
        with self.assertRaises(ProductNotFound):
            get_product("not-a-uuid")


class ProductInventoryModelTests(TestCase):
    def setUp(self):
        self.location = Location.objects.create(name="Main", code="MAIN")
        self.product = Product.objects.create(name="Charger", sku="CHG-1", unit_price=Decimal("15.00"))

    def test_available_is_derived_on_save(self):
        row = ProductInventory.objects.create(
            product=self.product, location=self.location, quantity=10, reserved_quantity=3
        )
        row.refresh_from_db()
        self.assertEqual(row.available_quantity, 7)

    def test_one_row_per_product_location(self):
        ProductInventory.objects.create(product=self.product, location=self.location, quantity=1)
        with self.assertRaises(IntegrityError):
            ProductInventory.objects.create(product=self.product, location=self.location, quantity=2)

    def test_reserved_above_quantity_rejected_by_db(self):
        with self.assertRaises(IntegrityError):
            ProductInventory.objects.create(
                product=self.product, location=self.location, quantity=1, reserved_quantity=2
            )
