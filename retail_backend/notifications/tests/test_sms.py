from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase, override_settings

from notifications.services import sms

GATEWAY = {
    "URL": "https://sms.example.test/api",
    "USER_ID": "shop",
    "API_KEY": "secret",
    "SENDER_ID": "RETAIL",
    "TIMEOUT_SECONDS": 3,
}


class FormatPhoneNumberTests(SimpleTestCase):
    def test_local_forms(self):
        cases = {
            "0771234567": "94771234567",
            "077 123-4567": "94771234567",
            "+94771234567": "94771234567",
            "94771234567": "94771234567",
            "771234567": "94771234567",
            "(077) 1234567": "94771234567",
            "": "",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(sms.format_phone_number(raw), expected)


class SendSmsTests(SimpleTestCase):
    def test_not_configured(self):
        result = sms.send_sms(to="0771234567", message="hi")
        self.assertFalse(result.success)
        self.assertEqual(result.message, "not configured")

    @override_settings(SMS_GATEWAY=GATEWAY)
    def test_success(self):
        with mock.patch.object(
            sms, "_http_get", return_value={"status": "success", "id": 991}
        ) as http_get:
            result = sms.send_sms(to="0771234567", message=" Hello ")

        self.assertTrue(result.success)
        self.assertEqual(result.message_id, "991")

        url, params = http_get.call_args.args
        self.assertEqual(url, GATEWAY["URL"])
        self.assertEqual(params["FUN"], "SEND_SINGLE")
        self.assertEqual(params["to"], "94771234567")
        self.assertEqual(params["msg"], "Hello")
        self.assertEqual(params["senderID"], "RETAIL")
        self.assertEqual(http_get.call_args.kwargs["timeout"], 3)

    @override_settings(SMS_GATEWAY=GATEWAY)
    def test_gateway_rejection(self):
        with mock.patch.object(
            sms, "_http_get", return_value={"status": "error", "message": "low balance"}
        ):
            result = sms.send_sms(to="0771234567", message="Hello")

        self.assertFalse(result.success)
        self.assertEqual(result.message, "low balance")

    @override_settings(SMS_GATEWAY=GATEWAY)
    def test_transport_error_is_returned(self):
        with mock.patch.object(
            sms, "_http_get", side_effect=sms.SmsTransportError("SMS gateway URLError: timed out")
        ):
            result = sms.send_sms(to="0771234567", message="Hello")

        self.assertFalse(result.success)
        self.assertIn("timed out", result.message)


class ConfirmationTextTests(SimpleTestCase):
    def test_text(self):
        text = sms.plain_confirmation_text(
            customer_name="Kamala",
            sale_number="SALE-2030-0001",
            total=Decimal("250"),
            location_name="Main Street",
        )
        self.assertEqual(
            text,
            "Dear Kamala, Thank you for your purchase! Sale #SALE-2030-0001 - "
            "Total: Rs. 250.00. Main Street. For support, contact us.",
        )

    @override_settings(SMS_GATEWAY=GATEWAY)
    def test_send_plain_confirmation(self):
        with mock.patch.object(
            sms, "_http_get", return_value={"status": "success", "id": "x1"}
        ) as http_get:
            result = sms.send_plain_confirmation(
                phone="0771234567",
                customer_name="Kamala",
                sale_number="SALE-2030-0001",
                total=Decimal("250.00"),
                location_name="Main Street",
            )

        self.assertTrue(result.success)
        self.assertIn("Sale #SALE-2030-0001", http_get.call_args.args[1]["msg"])
