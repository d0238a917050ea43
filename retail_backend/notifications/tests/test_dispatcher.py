from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase

from customers.models import Customer
from locations.models import Location
from notifications.models import Notification
from notifications.services import dispatcher
from notifications.services.sms import SmsResult
from sales.tests.base import SaleFixturesMixin

User = get_user_model()


class DispatcherTests(SaleFixturesMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.admin = User.objects.create_user(
            email="owner@example.com", password="pass1234", role=User.Role.ADMIN
        )
        self.manager = User.objects.create_user(
            email="manager@example.com",
            password="pass1234",
            role=User.Role.MANAGER,
            location=self.location,
        )
        other = Location.objects.create(name="Harbour Road", code="HARB")
        self.other_manager = User.objects.create_user(
            email="far@example.com",
            password="pass1234",
            role=User.Role.MANAGER,
            location=other,
        )
        User.objects.create_user(
            email="retired@example.com",
            password="pass1234",
            role=User.Role.ADMIN,
            is_active=False,
        )
        self.customer = Customer.objects.create(name="Kamala", phone="0771234567")

    def test_staff_recipients(self):
        sale = self.make_sale()

        result = dispatcher.notify_sale_created(sale)

        recipients = {n.recipient_user for n in result.notifications}
        self.assertEqual(recipients, {self.admin, self.manager})
        self.assertFalse(result.customer_delivered)

        admin_note = Notification.objects.get(recipient_user=self.admin)
        self.assertEqual(admin_note.recipient_type, Notification.RecipientType.ADMIN)
        self.assertIn(sale.sale_number, admin_note.message)
        self.assertIn("Main Street", admin_note.message)

        manager_note = Notification.objects.get(recipient_user=self.manager)
        self.assertEqual(manager_note.recipient_type, Notification.RecipientType.MANAGER)

    def test_customer_sms_unconfigured_gateway_is_recorded(self):
        sale = self.make_sale(customer_id=self.customer.id)

        result = dispatcher.notify_sale_created(sale)

        note = Notification.objects.get(channel=Notification.Channel.SMS)
        self.assertEqual(note.recipient_customer, self.customer)
        self.assertEqual(note.recipient_address, "0771234567")
        self.assertEqual(note.status, Notification.Status.FAILED)
        self.assertEqual(note.error_message, "not configured")
        self.assertFalse(result.customer_delivered)

    def test_customer_sms_delivered(self):
        sale = self.make_sale(customer_id=self.customer.id)

        with mock.patch(
            "notifications.services.dispatcher.sms.send_sms",
            return_value=SmsResult(success=True, message="sent", message_id="abc"),
        ) as send:
            result = dispatcher.notify_sale_created(sale)

        self.assertTrue(result.customer_delivered)
        send.assert_called_once()
        self.assertEqual(send.call_args.kwargs["to"], "0771234567")
        self.assertIn("Thank you Kamala!", send.call_args.kwargs["message"])

        note = Notification.objects.get(channel=Notification.Channel.SMS)
        self.assertEqual(note.status, Notification.Status.SENT)
        self.assertIsNotNone(note.sent_at)

    def test_transport_exception_marks_failed(self):
        sale = self.make_sale(customer_id=self.customer.id)

        with mock.patch(
            "notifications.services.dispatcher.sms.send_sms",
            side_effect=RuntimeError("socket closed"),
        ):
            result = dispatcher.notify_sale_created(sale)

        note = Notification.objects.get(channel=Notification.Channel.SMS)
        self.assertEqual(note.status, Notification.Status.FAILED)
        self.assertEqual(note.error_message, "socket closed")
        self.assertFalse(result.customer_delivered)
        # staff still notified
        self.assertEqual(
            Notification.objects.filter(channel=Notification.Channel.IN_APP).count(), 2
        )

    def test_walk_in_gets_no_customer_row(self):
        sale = self.make_sale(customer_name="Walk In", customer_phone="0770000000")
        dispatcher.notify_sale_created(sale)
        self.assertFalse(Notification.objects.filter(channel=Notification.Channel.SMS).exists())

    def test_cancellation_threads_under_created(self):
        sale = self.make_sale(customer_id=self.customer.id)
        dispatcher.notify_sale_created(sale)

        dispatcher.notify_sale_cancelled(sale, reason="Duplicate")

        for recipient in (self.admin, self.manager):
            created = Notification.objects.get(
                recipient_user=recipient, event_type=Notification.EventType.SALE_CREATED
            )
            cancelled = Notification.objects.get(
                recipient_user=recipient, event_type=Notification.EventType.SALE_CANCELLED
            )
            self.assertEqual(cancelled.parent, created)
            self.assertIn("Reason: Duplicate", cancelled.message)

        sms_cancel = Notification.objects.get(
            channel=Notification.Channel.SMS, event_type=Notification.EventType.SALE_CANCELLED
        )
        self.assertEqual(sms_cancel.parent.event_type, Notification.EventType.SALE_CREATED)
        self.assertIn("0112345678", sms_cancel.message)
