from django.test import TestCase

from locations.models import Location
from sales.models import Sale, SequenceCounter
from sales.services.exceptions import ValidationError
from sales.services.payment_methods import normalize_payment_method
from sales.services.sequence import format_number, highest_suffix, next_sale_number, next_value


class SequenceTests(TestCase):
    def test_next_value_is_monotonic_per_scope(self):
        self.assertEqual(next_value(scope="A"), 1)
        self.assertEqual(next_value(scope="A"), 2)
        self.assertEqual(next_value(scope="B"), 1)
        self.assertEqual(SequenceCounter.objects.get(scope="A").last_value, 2)

    def test_seed_only_used_on_first_call(self):
        self.assertEqual(next_value(scope="C", seed=lambda: 40), 41)
        self.assertEqual(next_value(scope="C", seed=lambda: 900), 42)

    def test_sale_number_format(self):
        self.assertEqual(next_sale_number(year=2031), "SALE-2031-0001")
        self.assertEqual(next_sale_number(year=2031), "SALE-2031-0002")
        self.assertEqual(next_sale_number(year=2032), "SALE-2032-0001")

    def test_sale_number_continues_from_existing_rows(self):
        location = Location.objects.create(name="Main", code="MAIN")
        Sale.objects.create(sale_number="SALE-2030-0041", location=location)
        Sale.objects.create(sale_number="SALE-2029-0999", location=location)

        self.assertEqual(next_sale_number(year=2030), "SALE-2030-0042")

    def test_helpers(self):
        self.assertEqual(highest_suffix(["SALE-2030-0007", "SALE-2030-0012", "junk", ""]), 12)
        self.assertEqual(highest_suffix([]), 0)
        self.assertEqual(format_number("WRN-2030-", 7), "WRN-2030-0007")
        self.assertEqual(format_number("SALE-2030-", 12345), "SALE-2030-12345")


class PaymentMethodTests(TestCase):
    def test_aliases(self):
        cases = {
            "cash": "CASH",
            " Card ": "CARD",
            "credit-card": "CARD",
            "bank transfer": "BANK_TRANSFER",
            "Mobile Money": "MOBILE_PAYMENT",
            "MOBILE_PAYMENT": "MOBILE_PAYMENT",
            "cheque": "CHECK",
            "other": "OTHER",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(normalize_payment_method(raw), expected)

    def test_rejects_unknown_and_empty(self):
        for raw in ("bitcoin", "", "   ", None):
            with self.subTest(raw=raw):
                with self.assertRaises(ValidationError):
                    normalize_payment_method(raw)
