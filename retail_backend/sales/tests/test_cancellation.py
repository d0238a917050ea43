from decimal import Decimal

from django.test import TestCase

from products.models import ProductInventory, StockMovement
from products.services.stock_movements import replay_chain
from sales.models import Sale
from sales.services.cancellation_service import cancel_sale
from sales.services.exceptions import InvalidState, NotFound
from sales.services.payment_service import add_payment
from sales.tests.base import SaleFixturesMixin


class CancelSaleTests(SaleFixturesMixin, TestCase):
    """
    Cancel guard: only unpaid sales; every line goes back on the shelf.
    """

    def test_unpaid_cancel_restores_stock(self):
        sale = self.make_sale(notes="Counter sale")

        cancel_sale(sale_id=sale.id, actor=self.cashier, reason="Customer changed mind")

        sale.refresh_from_db()
        self.assertEqual(sale.status, Sale.Status.CANCELLED)
        self.assertIsNotNone(sale.cancelled_at)
        self.assertEqual(sale.cancelled_by, self.cashier)
        self.assertEqual(
            sale.notes,
            f"Counter sale\n\nCancelled by user {self.cashier.pk}. Reason: Customer changed mind",
        )

        self.phone_row.refresh_from_db()
        self.case_row.refresh_from_db()
        self.assertEqual(self.phone_row.quantity, 10)
        self.assertEqual(self.case_row.quantity, 10)

        restores = StockMovement.objects.filter(
            movement_type=StockMovement.MovementType.CANCEL_RESTORE
        ).order_by("id")
        self.assertEqual(restores.count(), 2)
        for movement in restores:
            self.assertEqual(movement.reference_kind, StockMovement.ReferenceKind.SALE)
            self.assertEqual(movement.reference_id, str(sale.id))
            self.assertIn(f"Sale cancelled: {sale.sale_number}", movement.note)

        self.assertTrue(replay_chain(self.phone_row).is_consistent)
        self.assertTrue(replay_chain(self.case_row).is_consistent)

    def test_financials_stay_frozen(self):
        sale = self.make_sale()
        cancel_sale(sale_id=sale.id, actor=self.cashier)
        sale.refresh_from_db()
        self.assertEqual(sale.total_amount, Decimal("250.00"))
        self.assertEqual(sale.paid_amount, Decimal("0.00"))

    def test_paid_sale_must_be_refunded(self):
        sale = self.make_sale()
        add_payment(sale_id=sale.id, amount="1.00", method="CASH")

        with self.assertRaises(InvalidState) as ctx:
            cancel_sale(sale_id=sale.id, actor=self.cashier)

        self.assertEqual(
            ctx.exception.message,
            "Cannot cancel sale with payments. Please create a refund instead.",
        )
        sale.refresh_from_db()
        self.assertEqual(sale.status, Sale.Status.COMPLETED)
        self.phone_row.refresh_from_db()
        self.assertEqual(self.phone_row.quantity, 8)

    def test_double_cancel(self):
        sale = self.make_sale()
        cancel_sale(sale_id=sale.id, actor=self.cashier)

        with self.assertRaises(InvalidState) as ctx:
            cancel_sale(sale_id=sale.id, actor=self.cashier)
        self.assertEqual(ctx.exception.message, "Sale is already cancelled")

        self.phone_row.refresh_from_db()
        self.assertEqual(self.phone_row.quantity, 10)

    def test_refunded_sale_cannot_be_cancelled(self):
        sale = self.make_sale()
        Sale.objects.filter(pk=sale.pk).update(status=Sale.Status.REFUNDED)
        with self.assertRaises(InvalidState):
            cancel_sale(sale_id=sale.id, actor=self.cashier)

    def test_unknown_sale(self):
        with self.assertRaises(NotFound):
            cancel_sale(sale_id="00000000-0000-0000-0000-000000000000", actor=self.cashier)

    def test_missing_row_is_skipped(self):
        sale = self.make_sale()
        ProductInventory.objects.filter(pk=self.case_row.pk).delete()

        cancel_sale(sale_id=sale.id, actor=self.cashier)

        sale.refresh_from_db()
        self.assertEqual(sale.status, Sale.Status.CANCELLED)
        self.phone_row.refresh_from_db()
        self.assertEqual(self.phone_row.quantity, 10)
