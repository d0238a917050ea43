from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from sales.models import Sale, SalePayment
from sales.services.cancellation_service import cancel_sale
from sales.services.exceptions import InternalError, InvalidState, NotFound, ValidationError
from sales.services.payment_service import add_payment, derive_payment_status
from sales.tests.base import SaleFixturesMixin


class DerivePaymentStatusTests(TestCase):
    def test_thresholds(self):
        total = Decimal("300.00")
        self.assertEqual(derive_payment_status(paid=Decimal("0.00"), total=total), Sale.PaymentStatus.PENDING)
        self.assertEqual(derive_payment_status(paid=Decimal("0.01"), total=total), Sale.PaymentStatus.PARTIAL)
        self.assertEqual(derive_payment_status(paid=total, total=total), Sale.PaymentStatus.COMPLETED)
        self.assertEqual(derive_payment_status(paid=Decimal("400.00"), total=total), Sale.PaymentStatus.COMPLETED)


class AddPaymentTests(SaleFixturesMixin, TestCase):
    """
    Balance law: balance == paid - total after every append.
    """

    def three_phones(self):
        return self.make_sale(
            items=[{"product_id": str(self.phone.id), "quantity": 3, "unit_price": "100.00"}]
        )

    def test_installments_reach_completed(self):
        sale = self.three_phones()
        self.assertEqual(sale.total_amount, Decimal("300.00"))

        first = add_payment(sale_id=sale.id, amount="100.00", method="cash", received_by=self.cashier)
        sale.refresh_from_db()
        self.assertEqual(first.payment_number, f"PAY-{sale.sale_number}-1")
        self.assertEqual(sale.paid_amount, Decimal("100.00"))
        self.assertEqual(sale.balance_amount, Decimal("-200.00"))
        self.assertEqual(sale.payment_status, Sale.PaymentStatus.PARTIAL)

        second = add_payment(sale_id=sale.id, amount="200.00", method="CARD", reference="TX-9")
        sale.refresh_from_db()
        self.assertEqual(second.payment_number, f"PAY-{sale.sale_number}-2")
        self.assertEqual(second.reference_number, "TX-9")
        self.assertEqual(sale.paid_amount, Decimal("300.00"))
        self.assertEqual(sale.balance_amount, Decimal("0.00"))
        self.assertEqual(sale.payment_status, Sale.PaymentStatus.COMPLETED)

        self.assertEqual(sale.status, Sale.Status.COMPLETED)

    def test_numbering_continues_after_checkout_payment(self):
        sale = self.make_sale(paid_amount="50.00")
        payment = add_payment(sale_id=sale.id, amount="200.00", method="bank transfer")
        self.assertEqual(payment.payment_number, f"PAY-{sale.sale_number}-2")
        self.assertEqual(payment.method, SalePayment.Method.BANK_TRANSFER)

        sale.refresh_from_db()
        self.assertEqual(sale.balance_amount, sale.paid_amount - sale.total_amount)

    def test_overpayment(self):
        sale = self.make_sale()
        add_payment(sale_id=sale.id, amount="260.00", method="CASH")
        sale.refresh_from_db()
        self.assertEqual(sale.balance_amount, Decimal("10.00"))
        self.assertEqual(sale.payment_status, Sale.PaymentStatus.COMPLETED)

    def test_unknown_sale(self):
        with self.assertRaises(NotFound):
            add_payment(sale_id="00000000-0000-0000-0000-000000000000", amount="1.00", method="CASH")

    def test_cancelled_sale_rejects_payment(self):
        sale = self.make_sale()
        cancel_sale(sale_id=sale.id, actor=self.cashier, reason="Customer left")

        with self.assertRaises(InvalidState):
            add_payment(sale_id=sale.id, amount="10.00", method="CASH")
        self.assertFalse(SalePayment.objects.filter(sale=sale).exists())

    def test_invalid_inputs(self):
        sale = self.make_sale()
        with self.assertRaises(ValidationError):
            add_payment(sale_id=sale.id, amount="0.00", method="CASH")
        with self.assertRaises(ValidationError):
            add_payment(sale_id=sale.id, amount="-5.00", method="CASH")
        with self.assertRaises(ValidationError):
            add_payment(sale_id=sale.id, amount="5.00", method="IOU")
        with self.assertRaises(ValidationError):
            add_payment(sale_id=sale.id, amount="5.00", method="")

        sale.refresh_from_db()
        self.assertEqual(sale.paid_amount, Decimal("0.00"))

    def test_database_error_is_wrapped(self):
        sale = self.three_phones()

        with mock.patch(
            "sales.services.payment_service.SalePayment.objects.create",
            side_effect=DatabaseError("disk full"),
        ):
            with self.assertRaises(InternalError) as ctx:
                add_payment(sale_id=sale.id, amount="100.00", method="CASH")

        self.assertEqual(ctx.exception.code, "INTERNAL_ERROR")
        self.assertEqual(ctx.exception.http_status, 500)
        sale.refresh_from_db()
        self.assertEqual(sale.paid_amount, Decimal("0.00"))
        self.assertEqual(sale.payment_status, Sale.PaymentStatus.PENDING)
        self.assertFalse(SalePayment.objects.filter(sale=sale).exists())
