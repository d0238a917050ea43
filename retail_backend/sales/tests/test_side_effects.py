from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from notifications.models import Notification
from notifications.services.sms import SmsResult
from products.models import Product
from sales.models import Sale
from sales.services.cancellation_service import cancel_sale
from sales.tests.base import SaleFixturesMixin
from warranty.models import WarrantyCard

User = get_user_model()


class PostCommitSideEffectTests(SaleFixturesMixin, TestCase):
    """
    Warranty / notifications / SMS run after commit and never fail the sale.
    """

    def setUp(self):
        super().setUp()
        self.admin = User.objects.create_user(
            email="owner@example.com", password="pass1234", role=User.Role.ADMIN
        )
        Product.objects.filter(pk=self.phone.pk).update(warranty_months=6)

    def test_nothing_runs_before_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            self.make_sale()

        self.assertEqual(len(callbacks), 1)
        self.assertFalse(WarrantyCard.objects.exists())
        self.assertFalse(Notification.objects.exists())

    def test_warranty_and_staff_notifications_after_commit(self):
        with mock.patch("sales.services.side_effects.sms.send_plain_confirmation") as fallback:
            with self.captureOnCommitCallbacks(execute=True):
                sale = self.make_sale()

        card = WarrantyCard.objects.get()
        self.assertEqual(card.sale, sale)
        self.assertEqual(card.sale_item, sale.items.get(product=self.phone))
        self.assertEqual(card.warranty_months, 6)

        note = Notification.objects.get(recipient_user=self.admin)
        self.assertEqual(note.event_type, Notification.EventType.SALE_CREATED)
        self.assertEqual(note.channel, Notification.Channel.IN_APP)
        self.assertEqual(note.status, Notification.Status.SENT)

        # walk-in without a phone: no fallback
        fallback.assert_not_called()

    def test_sms_fallback_for_walk_in_with_phone(self):
        with mock.patch(
            "sales.services.side_effects.sms.send_plain_confirmation",
            return_value=SmsResult(success=True, message="sent", message_id="m-1"),
        ) as fallback:
            with self.captureOnCommitCallbacks(execute=True):
                sale = self.make_sale(customer_name="Kamala", customer_phone="0771234567")

        fallback.assert_called_once_with(
            phone="0771234567",
            customer_name="Kamala",
            sale_number=sale.sale_number,
            total=sale.total_amount,
            location_name="Main Street",
        )

    def test_warranty_failure_does_not_block_notifications(self):
        with mock.patch(
            "sales.services.side_effects.issue_from_line_item",
            side_effect=RuntimeError("printer on fire"),
        ):
            with self.captureOnCommitCallbacks(execute=True):
                sale = self.make_sale()

        self.assertTrue(Sale.objects.filter(pk=sale.pk).exists())
        self.assertTrue(Notification.objects.filter(recipient_user=self.admin).exists())

    def test_dispatcher_failure_is_swallowed(self):
        with mock.patch(
            "sales.services.side_effects.dispatcher.notify_sale_created",
            side_effect=RuntimeError("queue down"),
        ):
            with self.captureOnCommitCallbacks(execute=True):
                sale = self.make_sale()

        self.assertEqual(Sale.objects.get(pk=sale.pk).status, Sale.Status.COMPLETED)
        self.assertEqual(WarrantyCard.objects.count(), 1)

    @override_settings(SALES_SIDE_EFFECTS_ENABLED=False)
    def test_master_switch(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            self.make_sale()
        self.assertEqual(len(callbacks), 0)
        self.assertFalse(WarrantyCard.objects.exists())

    def test_cancellation_notifications(self):
        with self.captureOnCommitCallbacks(execute=True):
            sale = self.make_sale()
        with self.captureOnCommitCallbacks(execute=True):
            cancel_sale(sale_id=sale.id, actor=self.cashier, reason="Duplicate")

        created = Notification.objects.get(
            recipient_user=self.admin, event_type=Notification.EventType.SALE_CREATED
        )
        cancelled = Notification.objects.get(
            recipient_user=self.admin, event_type=Notification.EventType.SALE_CANCELLED
        )
        self.assertEqual(cancelled.parent, created)
        self.assertIn("Reason: Duplicate", cancelled.message)
