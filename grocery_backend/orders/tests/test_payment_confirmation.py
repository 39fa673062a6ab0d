# orders/tests/test_payment_confirmation.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase

from orders.models import Order
from orders.services import notifications
from orders.services.exceptions import (
    InvalidPaymentTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from orders.services.payment_confirmation import (
    ALREADY_PAID,
    NOT_FOUND,
    NOW_PAID,
    confirm_upi_payment,
    set_payment_status,
    try_mark_paid,
)

User = get_user_model()


def make_order(user, **overrides):
    fields = {
        "user": user,
        "items": [
            {
                "productId": "00000000-0000-0000-0000-000000000001",
                "productName": "Apples 1kg",
                "quantity": 1,
                "priceAtOrder": "80.00",
                "totalPrice": "80.00",
            }
        ],
        "shipping_address": {"fullName": "Asha Rao", "pincode": "560001"},
        "payment_method": Order.METHOD_UPI,
        "subtotal_amount": Decimal("80.00"),
        "total_amount": Decimal("80.00"),
    }
    fields.update(overrides)
    return Order.objects.create(**fields)


class TryMarkPaidTests(TestCase):
    """
    GUARANTEES:
    - pending -> paid exactly once; repeats report ALREADY_PAID
    - only the first transition sends the payment email
    - a failed order never becomes paid
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.order = make_order(self.user)

    def test_first_call_marks_paid(self):
        with self.captureOnCommitCallbacks(execute=True):
            outcome = try_mark_paid(self.order.id, source="test")

        self.assertEqual(outcome, NOW_PAID)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PAID)
        self.assertIsNotNone(self.order.paid_at)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn("Payment received", mail.outbox[0].subject)

    def test_repeat_is_noop(self):
        with self.captureOnCommitCallbacks(execute=True):
            try_mark_paid(self.order.id)
        self.order.refresh_from_db()
        paid_at = self.order.paid_at

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            outcome = try_mark_paid(str(self.order.id))

        self.assertEqual(outcome, ALREADY_PAID)
        self.assertEqual(callbacks, [])
        self.assertEqual(len(mail.outbox), 1)
        self.order.refresh_from_db()
        self.assertEqual(self.order.paid_at, paid_at)

    def test_unknown_and_malformed_ids(self):
        self.assertEqual(try_mark_paid("00000000-0000-0000-0000-000000000000"), NOT_FOUND)
        self.assertEqual(try_mark_paid("not-a-uuid"), NOT_FOUND)
        self.assertEqual(try_mark_paid(None), NOT_FOUND)

    def test_failed_order_cannot_be_paid(self):
        Order.objects.filter(pk=self.order.pk).update(payment_status=Order.PAYMENT_FAILED)
        with self.assertRaises(InvalidPaymentTransitionError):
            try_mark_paid(self.order.id)

    def test_notification_failure_does_not_propagate(self):
        with mock.patch.object(notifications, "send_mail", side_effect=OSError("smtp down")):
            with self.captureOnCommitCallbacks(execute=True):
                outcome = try_mark_paid(self.order.id)

        self.assertEqual(outcome, NOW_PAID)
        self.order.refresh_from_db()
        self.assertTrue(self.order.is_paid)


class SetPaymentStatusTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.order = make_order(self.user, payment_method=Order.METHOD_COD)

    def test_paid_twice(self):
        with self.captureOnCommitCallbacks(execute=True):
            set_payment_status(order_id=self.order.id, payment_status="paid")
            order = set_payment_status(order_id=self.order.id, payment_status="paid")

        self.assertEqual(order.payment_status, Order.PAYMENT_PAID)
        self.assertEqual(len(mail.outbox), 1)

    def test_failed_then_paid_rejected(self):
        order = set_payment_status(order_id=self.order.id, payment_status="failed")
        self.assertEqual(order.payment_status, Order.PAYMENT_FAILED)

        with self.assertRaises(InvalidPaymentTransitionError):
            set_payment_status(order_id=self.order.id, payment_status="paid")

    def test_paid_then_failed_rejected(self):
        set_payment_status(order_id=self.order.id, payment_status="paid")
        with self.assertRaises(InvalidPaymentTransitionError):
            set_payment_status(order_id=self.order.id, payment_status="failed")

    def test_unknown_order(self):
        with self.assertRaises(OrderNotFoundError):
            set_payment_status(order_id="00000000-0000-0000-0000-000000000000", payment_status="paid")
        with self.assertRaises(OrderNotFoundError):
            set_payment_status(order_id="00000000-0000-0000-0000-000000000000", payment_status="failed")

    def test_invalid_value(self):
        with self.assertRaises(OrderValidationError):
            set_payment_status(order_id=self.order.id, payment_status="refunded")


class ConfirmUpiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.other = User.objects.create_user(email="other@example.com", password="pass1234")

    def test_owner_confirms(self):
        order = make_order(self.user)
        order, outcome = confirm_upi_payment(order_id=order.id, user=self.user)
        self.assertEqual(outcome, NOW_PAID)
        self.assertTrue(order.is_paid)

        _, outcome = confirm_upi_payment(order_id=order.id, user=self.user)
        self.assertEqual(outcome, ALREADY_PAID)

    def test_not_owner(self):
        order = make_order(self.user)
        with self.assertRaises(OrderNotFoundError):
            confirm_upi_payment(order_id=order.id, user=self.other)

    def test_non_upi_order(self):
        order = make_order(self.user, payment_method=Order.METHOD_COD)
        with self.assertRaises(OrderValidationError):
            confirm_upi_payment(order_id=order.id, user=self.user)
