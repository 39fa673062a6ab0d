# payments/tests/test_checkout.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from orders.models import Order
from payments.services.checkout import build_payment_payload
from payments.services.exceptions import GatewayError

User = get_user_model()

CONFIGURED = {
    "PROVIDER": "razorpay",
    "CURRENCY": "INR",
    "RAZORPAY": {"KEY_ID": "rzp_test_key", "KEY_SECRET": "key-secret", "WEBHOOK_SECRET": "", "TIMEOUT_SECONDS": 5},
    "UPI": {"MERCHANT_VPA": "grocer@upi", "MERCHANT_NAME": "Corner Grocer"},
}


@override_settings(PAYMENTS=CONFIGURED)
class BuildPaymentPayloadTests(TestCase):
    """
    GUARANTEES:
    - Gateway order id is stored on the order
    - A gateway failure falls back to the UPI QR payload
    """

    def setUp(self):
        user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.order = Order.objects.create(
            user=user,
            items=[],
            payment_method=Order.METHOD_UPI,
            subtotal_amount=Decimal("250.00"),
            total_amount=Decimal("250.00"),
        )

    @mock.patch("payments.services.razorpay.create_gateway_order")
    def test_gateway_payload(self, create):
        create.return_value = {
            "key_id": "rzp_test_key",
            "razorpay_order_id": "order_RZP9",
            "amount": 25000,
            "currency": "INR",
        }

        kind, payload = build_payment_payload(order=self.order)

        self.assertEqual(kind, "razorpay")
        self.assertEqual(payload["razorpay_order_id"], "order_RZP9")
        create.assert_called_once_with(order_id=self.order.id, amount=Decimal("250.00"))
        self.order.refresh_from_db()
        self.assertEqual(self.order.gateway_order_id, "order_RZP9")

    @mock.patch("payments.services.razorpay.create_gateway_order", side_effect=GatewayError("boom"))
    def test_gateway_failure_falls_back(self, _create):
        kind, payload = build_payment_payload(order=self.order)

        self.assertEqual(kind, "upi")
        self.assertEqual(payload["vpa"], "grocer@upi")
        self.assertIn("pn=Corner%20Grocer", payload["upiUri"])
        self.order.refresh_from_db()
        self.assertEqual(self.order.gateway_order_id, "")

    @override_settings(PAYMENTS={**CONFIGURED, "RAZORPAY": {"KEY_ID": "", "KEY_SECRET": ""}})
    @mock.patch("payments.services.razorpay.create_gateway_order")
    def test_unconfigured_skips_gateway(self, create):
        kind, _ = build_payment_payload(order=self.order)
        self.assertEqual(kind, "upi")
        create.assert_not_called()
