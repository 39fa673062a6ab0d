# payments/services/checkout.py

"""
PAYMENT PAYLOAD FOR A NEW UPI ORDER

- Razorpay configured  -> create a gateway order, store its id on our order,
                          return ("razorpay", {key_id, razorpay_order_id, amount, currency})
- otherwise / on any gateway failure
                       -> ("upi", {vpa, upiUri, qrUrl})

A gateway failure never fails checkout; the order already exists.
"""

from __future__ import annotations

import logging

from orders.models import Order
from payments.services import razorpay
from payments.services.exceptions import PaymentError
from payments.services.upi import build_upi_payload

logger = logging.getLogger(__name__)


def build_payment_payload(*, order: Order) -> tuple[str, dict]:
    if razorpay.is_configured():
        try:
            payload = razorpay.create_gateway_order(order_id=order.id, amount=order.total_amount)
        except PaymentError:
            logger.exception("Razorpay order creation failed; falling back to UPI QR", extra={"order_id": str(order.id)})
        else:
            Order.objects.filter(pk=order.pk).update(gateway_order_id=payload["razorpay_order_id"])
            order.gateway_order_id = payload["razorpay_order_id"]
            return "razorpay", payload

    return "upi", build_upi_payload(
        order_id=order.id,
        amount=order.total_amount,
        currency=razorpay.currency(),
    )
