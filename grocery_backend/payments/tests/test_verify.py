# payments/tests/test_verify.py

import hashlib
import hmac
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from orders.models import Order

User = get_user_model()

PAYMENTS = {
    "PROVIDER": "razorpay",
    "CURRENCY": "INR",
    "RAZORPAY": {"KEY_ID": "rzp_test_key", "KEY_SECRET": "key-secret", "WEBHOOK_SECRET": "", "TIMEOUT_SECONDS": 5},
}

URL = "/api/payments/gateway/verify/"


def checkout_signature(provider_order_id, payment_id, secret="key-secret"):
    message = f"{provider_order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


@override_settings(PAYMENTS=PAYMENTS)
class GatewayVerifyTests(TestCase):
    """
    GUARANTEES:
    - Only a valid checkout signature can mark an order paid
    - The provider order must be the one created for this order
    - Customers can only verify their own orders
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.other = User.objects.create_user(email="other@example.com", password="pass1234")
        self.order = Order.objects.create(
            user=self.user,
            items=[],
            payment_method=Order.METHOD_UPI,
            subtotal_amount=Decimal("80.00"),
            total_amount=Decimal("80.00"),
            gateway_order_id="order_RZP1",
        )
        self.client.force_authenticate(self.user)

    def _body(self, provider_order_id="order_RZP1", payment_id="pay_1", signature=None, order_id=None):
        return {
            "providerOrderId": provider_order_id,
            "paymentId": payment_id,
            "signature": signature or checkout_signature(provider_order_id, payment_id),
            "orderId": str(order_id or self.order.id),
        }

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        self.assertEqual(self.client.post(URL, self._body(), format="json").status_code, 401)

    def test_valid_signature_marks_paid(self):
        res = self.client.post(URL, self._body(), format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data, {"ok": True, "outcome": "now_paid"})

        res = self.client.post(URL, self._body(), format="json")
        self.assertEqual(res.data["outcome"], "already_paid")

    def test_invalid_signature(self):
        res = self.client.post(URL, self._body(signature="0" * 64), format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_SIGNATURE")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PENDING)

    def test_missing_fields(self):
        res = self.client.post(URL, {"orderId": str(self.order.id)}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_provider_order_mismatch(self):
        res = self.client.post(URL, self._body(provider_order_id="order_OTHER"), format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "GATEWAY_ORDER_MISMATCH")

    def test_other_users_order(self):
        self.client.force_authenticate(self.other)
        res = self.client.post(URL, self._body(), format="json")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "ORDER_NOT_FOUND")

    def test_failed_order(self):
        Order.objects.filter(pk=self.order.pk).update(payment_status=Order.PAYMENT_FAILED)
        res = self.client.post(URL, self._body(), format="json")
        self.assertEqual(res.status_code, 409)

    @override_settings(PAYMENTS={**PAYMENTS, "RAZORPAY": {"KEY_ID": "", "KEY_SECRET": ""}})
    def test_not_configured(self):
        res = self.client.post(URL, self._body(), format="json")
        self.assertEqual(res.status_code, 503)
        self.assertEqual(res.data["error"]["code"], "GATEWAY_NOT_CONFIGURED")
