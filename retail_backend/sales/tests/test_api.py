from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase
from rest_framework.test import APIClient

from products.models import ProductInventory
from sales.models import Sale
from sales.tests.base import SaleFixturesMixin

User = get_user_model()

SALES_URL = "/api/sales/sales/"


class SalesApiTests(SaleFixturesMixin, TestCase):
    """
    HTTP surface: capability checks and the canonical error envelope.
    """

    def setUp(self):
        super().setUp()
        self.manager = User.objects.create_user(
            email="manager@example.com",
            password="pass1234",
            role=User.Role.MANAGER,
            location=self.location,
        )
        self.technician = User.objects.create_user(
            email="tech@example.com", password="pass1234", role=User.Role.TECHNICIAN
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.cashier)

    def payload(self, **overrides):
        data = {
            "location_id": str(self.location.id),
            "items": [
                {"product_id": str(self.phone.id), "quantity": 2, "unit_price": "100.00"},
                {"product_id": str(self.case.id), "quantity": 1, "unit_price": "50.00"},
            ],
        }
        data.update(overrides)
        return data

    def assertEnvelope(self, res, status_code, code):
        self.assertEqual(res.status_code, status_code, res.data)
        self.assertEqual(res.data["error"]["code"], code)
        self.assertIn("message", res.data["error"])
        self.assertIn("details", res.data["error"])

    # ---------------- create ----------------

    def test_create_sale(self):
        res = self.client.post(
            SALES_URL,
            self.payload(payments=[{"amount": "250.00", "method": "cash"}]),
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertRegex(res.data["sale_number"], r"^SALE-\d{4}-\d{4}$")
        self.assertEqual(res.data["total_amount"], "250.00")
        self.assertEqual(res.data["balance_amount"], "0.00")
        self.assertEqual(res.data["payment_status"], "COMPLETED")
        self.assertEqual(len(res.data["items"]), 2)
        self.assertEqual(len(res.data["payments"]), 1)
        self.assertEqual(res.data["sold_by"], self.cashier.id)

    def test_create_oversell_returns_409(self):
        ProductInventory.objects.filter(pk=self.phone_row.pk).update(quantity=1, available_quantity=1)

        res = self.client.post(SALES_URL, self.payload(), format="json")

        self.assertEnvelope(res, 409, "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["error"]["details"]["available"], 1)
        self.assertEqual(res.data["error"]["details"]["requested"], 2)
        self.assertFalse(Sale.objects.exists())

    def test_create_invalid_payload(self):
        res = self.client.post(SALES_URL, self.payload(items=[]), format="json")
        self.assertEnvelope(res, 400, "VALIDATION_ERROR")
        self.assertIn("items", res.data["error"]["details"])

    def test_create_unknown_product(self):
        res = self.client.post(
            SALES_URL,
            self.payload(
                items=[
                    {
                        "product_id": "00000000-0000-0000-0000-000000000000",
                        "quantity": 1,
                        "unit_price": "1.00",
                    }
                ]
            ),
            format="json",
        )
        self.assertEnvelope(res, 404, "NOT_FOUND")

    def test_create_requires_sell_capability(self):
        self.client.force_authenticate(user=self.technician)
        res = self.client.post(SALES_URL, self.payload(), format="json")
        self.assertEqual(res.status_code, 403)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        res = self.client.get(SALES_URL)
        self.assertEqual(res.status_code, 401)

    # ---------------- reads ----------------

    def test_list_and_filter(self):
        self.client.post(SALES_URL, self.payload(customer_name="Kamala"), format="json")
        self.client.post(
            SALES_URL,
            self.payload(payments=[{"amount": "250.00", "method": "CASH"}]),
            format="json",
        )

        res = self.client.get(SALES_URL)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 2)

        res = self.client.get(SALES_URL, {"payment_status": "PENDING"})
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["customer_name"], "Kamala")

        res = self.client.get(SALES_URL, {"search": "kam"})
        self.assertEqual(res.data["count"], 1)

    def test_list_bad_filter(self):
        res = self.client.get(SALES_URL, {"date_from": "not-a-date"})
        self.assertEnvelope(res, 400, "VALIDATION_ERROR")

    def test_retrieve_and_receipt(self):
        sale = self.make_sale()

        res = self.client.get(f"{SALES_URL}{sale.id}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["sale_number"], sale.sale_number)

        res = self.client.get(f"{SALES_URL}{sale.id}/receipt/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["company"]["name"], "Test Retail")
        self.assertEqual(res.data["totals"]["total"], "250.00")

    def test_retrieve_missing(self):
        res = self.client.get(f"{SALES_URL}00000000-0000-0000-0000-000000000000/")
        self.assertEnvelope(res, 404, "NOT_FOUND")

    # ---------------- payments / refunds / cancel ----------------

    def test_add_payment(self):
        sale = self.make_sale()
        res = self.client.post(
            f"{SALES_URL}{sale.id}/payments/",
            {"amount": "100.00", "method": "card"},
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["payment_number"], f"PAY-{sale.sale_number}-1")
        self.assertEqual(res.data["method"], "CARD")

        sale.refresh_from_db()
        self.assertEqual(sale.balance_amount, Decimal("-150.00"))

    def test_add_payment_invalid_method(self):
        sale = self.make_sale()
        res = self.client.post(
            f"{SALES_URL}{sale.id}/payments/",
            {"amount": "100.00", "method": "seashells"},
            format="json",
        )
        self.assertEnvelope(res, 400, "VALIDATION_ERROR")

    def test_refund_requires_refund_capability(self):
        sale = self.make_sale(paid_amount="250.00")
        res = self.client.post(
            f"{SALES_URL}{sale.id}/refunds/",
            {"amount": "50.00", "reason": "Faulty", "method": "CASH"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_manager_refund(self):
        sale = self.make_sale(paid_amount="250.00")
        self.client.force_authenticate(user=self.manager)

        res = self.client.post(
            f"{SALES_URL}{sale.id}/refunds/",
            {
                "amount": "100.00",
                "reason": "Faulty",
                "method": "CASH",
                "items": [{"product_id": str(self.phone.id), "quantity": 1}],
            },
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertRegex(res.data["refund_number"], r"^REF-\d{4}-\d+$")
        self.assertEqual(len(res.data["items"]), 1)
        sale.refresh_from_db()
        self.assertEqual(sale.status, Sale.Status.PARTIAL_REFUND)

    def test_refund_over_total(self):
        sale = self.make_sale(paid_amount="250.00")
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            f"{SALES_URL}{sale.id}/refunds/",
            {"amount": "300.00", "reason": "Faulty", "method": "CASH"},
            format="json",
        )
        self.assertEnvelope(res, 400, "VALIDATION_ERROR")

    def test_cancel(self):
        sale = self.make_sale()
        self.client.force_authenticate(user=self.manager)

        res = self.client.post(f"{SALES_URL}{sale.id}/cancel/", {"reason": "Test"}, format="json")

        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["status"], "CANCELLED")
        self.phone_row.refresh_from_db()
        self.assertEqual(self.phone_row.quantity, 10)

    def test_cancel_paid_sale_conflict(self):
        sale = self.make_sale(paid_amount="10.00")
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(f"{SALES_URL}{sale.id}/cancel/", {}, format="json")
        self.assertEnvelope(res, 409, "INVALID_STATE")

    def test_cashier_cannot_cancel(self):
        sale = self.make_sale()
        res = self.client.post(f"{SALES_URL}{sale.id}/cancel/", {}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_payment_persistence_failure_envelope(self):
        sale = self.make_sale()
        with mock.patch(
            "sales.services.payment_service.SalePayment.objects.create",
            side_effect=DatabaseError("disk full"),
        ):
            res = self.client.post(
                f"{SALES_URL}{sale.id}/payments/",
                {"amount": "100.00", "method": "CASH"},
                format="json",
            )
        self.assertEnvelope(res, 500, "INTERNAL_ERROR")
