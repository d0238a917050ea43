from decimal import Decimal

from django.test import SimpleTestCase

from sales.models import Sale
from sales.services.exceptions import InvalidState
from sales.services.sale_lifecycle import (
    can_transition,
    is_final,
    refund_status_for,
    validate_transition,
)

S = Sale.Status


class SaleLifecycleTests(SimpleTestCase):
    def test_allowed_moves(self):
        self.assertTrue(can_transition(from_status=S.COMPLETED, to_status=S.CANCELLED))
        self.assertTrue(can_transition(from_status=S.COMPLETED, to_status=S.PARTIAL_REFUND))
        self.assertTrue(can_transition(from_status=S.PARTIAL_REFUND, to_status=S.PARTIAL_REFUND))
        self.assertTrue(can_transition(from_status=S.PARTIAL_REFUND, to_status=S.REFUNDED))

    def test_forbidden_moves(self):
        self.assertFalse(can_transition(from_status=S.PARTIAL_REFUND, to_status=S.CANCELLED))
        self.assertFalse(can_transition(from_status=S.REFUNDED, to_status=S.PARTIAL_REFUND))
        self.assertFalse(can_transition(from_status=S.CANCELLED, to_status=S.COMPLETED))

    def test_final_statuses(self):
        self.assertTrue(is_final(S.CANCELLED))
        self.assertTrue(is_final(S.REFUNDED))
        self.assertFalse(is_final(S.PARTIAL_REFUND))

    def test_refund_status_for(self):
        total = Decimal("250.00")
        self.assertEqual(refund_status_for(total=total, refunded=Decimal("249.99")), S.PARTIAL_REFUND)
        self.assertEqual(refund_status_for(total=total, refunded=total), S.REFUNDED)

    def test_validate_transition_raises(self):
        sale = Sale(sale_number="SALE-2030-0001", status=S.CANCELLED)
        with self.assertRaises(InvalidState) as ctx:
            validate_transition(sale=sale, target_status=S.REFUNDED)
        self.assertEqual(ctx.exception.details["status"], S.CANCELLED)
