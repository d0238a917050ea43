# products/tests/test_inventory_ledger.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from locations.models import Location
from products.models import Product, ProductInventory, StockMovement
from products.services import inventory_ledger
from products.services.inventory_ledger import InsufficientStockError, InventoryRowNotFound
from products.services.stock_movements import record_movement


class InventoryLedgerTests(TestCase):
    """
    Ledger guarantees:
    - decrement never drives available below zero
    - reserved stock is not sellable
    - increment/decrement report before/after captured under the lock
    """

    def setUp(self):
        self.location = Location.objects.create(name="Main", code="MAIN")
        self.other_location = Location.objects.create(name="Annex", code="ANX")
        self.product = Product.objects.create(name="Screen Protector", sku="SP-1", unit_price=Decimal("7.00"))
        self.row = ProductInventory.objects.create(
            product=self.product, location=self.location, quantity=5, reserved_quantity=1
        )

    def test_check_available(self):
        self.assertTrue(
            inventory_ledger.check_available(
                product_id=self.product.id, location_id=self.location.id, quantity=4
            )
        )
        self.assertFalse(
            inventory_ledger.check_available(
                product_id=self.product.id, location_id=self.location.id, quantity=5
            )
        )
        self.assertFalse(
            inventory_ledger.check_available(
                product_id=self.product.id, location_id=self.other_location.id, quantity=1
            )
        )

    def test_decrement_reduces_quantity_and_available(self):
        change = inventory_ledger.decrement(
            product_id=self.product.id, location_id=self.location.id, quantity=3
        )
        self.assertEqual((change.before, change.after), (5, 2))

        self.row.refresh_from_db()
        self.assertEqual(self.row.quantity, 2)
        self.assertEqual(self.row.reserved_quantity, 1)
        self.assertEqual(self.row.available_quantity, 1)

    def test_decrement_respects_reserved_stock(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            inventory_ledger.decrement(
                product_id=self.product.id, location_id=self.location.id, quantity=5
            )

        self.assertEqual(ctx.exception.available, 4)
        self.assertEqual(ctx.exception.requested, 5)
        self.assertIn("Available: 4, Required: 5", str(ctx.exception))

        self.row.refresh_from_db()
        self.assertEqual(self.row.quantity, 5)

    def test_missing_row(self):
        with self.assertRaises(InventoryRowNotFound):
            inventory_ledger.decrement(
                product_id=self.product.id, location_id=self.other_location.id, quantity=1
            )

    def test_non_integer_quantity_rejected(self):
        with self.assertRaises(ValueError):
            inventory_ledger.increment(
                product_id=self.product.id, location_id=self.location.id, quantity=0
            )
        with self.assertRaises(ValueError):
            inventory_ledger.increment(
                product_id=self.product.id, location_id=self.location.id, quantity=True
            )

    def test_increment(self):
        change = inventory_ledger.increment(
            product_id=self.product.id, location_id=self.location.id, quantity=2
        )
        self.assertEqual((change.before, change.after), (5, 7))
        self.row.refresh_from_db()
        self.assertEqual(self.row.available_quantity, 6)

    def test_lock_rows_returns_map_in_product_order(self):
        second = Product.objects.create(name="Adapter", sku="AD-1", unit_price=Decimal("3.00"))
        ProductInventory.objects.create(product=second, location=self.location, quantity=1)

        rows = inventory_ledger.lock_rows(
            location_id=self.location.id, product_ids=[second.id, self.product.id, self.product.id]
        )
        self.assertEqual(set(rows), {str(self.product.id), str(second.id)})


class StockMovementTests(TestCase):
    def setUp(self):
        self.location = Location.objects.create(name="Main", code="MAIN")
        self.product = Product.objects.create(name="Earbuds", sku="EB-1", unit_price=Decimal("20.00"))

    def _record(self, **overrides):
        data = dict(
            product_id=self.product.id,
            location_id=self.location.id,
            quantity_before=5,
            quantity_after=3,
            movement_type=StockMovement.MovementType.SALE_OUT,
            reference_kind=StockMovement.ReferenceKind.SALE,
            reference_id="sale-1",
        )
        data.update(overrides)
        return record_movement(**data)

    def test_records_magnitude_and_sign(self):
        movement = self._record()
        self.assertEqual(movement.quantity, 2)
        self.assertEqual(movement.signed_quantity, -2)

    def test_direction_must_match_type(self):
        with self.assertRaises(ValidationError):
            self._record(movement_type=StockMovement.MovementType.RETURN_IN)

    def test_zero_quantity_rejected(self):
        with self.assertRaises(ValidationError):
            self._record(quantity_before=3, quantity_after=3)

    def test_movements_are_immutable(self):
        movement = self._record()
        movement.note = "edited"
        with self.assertRaises(ValidationError):
            movement.save()
        with self.assertRaises(ValidationError):
            movement.delete()
