# orders/services/payment_confirmation.py

"""
======================================================
PATH: orders/services/payment_confirmation.py
======================================================
PAYMENT CONFIRMATION ROUTER (core transition)

Every channel that can say "this order is paid" ends in try_mark_paid():
- manual     set_payment_status()       (payments.reconcile capability)
- client UPI confirm_upi_payment()      (order owner, trusts the payer)
- gateway    webhook / client-relayed verification (payments app), after
             signature checks

try_mark_paid() is one conditional UPDATE:

    UPDATE orders SET payment_status='paid' ... WHERE id=? AND payment_status='pending'

so concurrent or replayed confirmations converge: exactly one caller sees
NOW_PAID (and only that caller queues the payment email), every other caller
sees ALREADY_PAID. A failed order is terminal and cannot become paid.
"""

from __future__ import annotations

import logging
import uuid

from django.db import transaction
from django.utils import timezone

from orders.models import Order
from orders.services import notifications
from orders.services.exceptions import (
    InvalidPaymentTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from orders.services.lifecycle import validate_payment_transition

logger = logging.getLogger(__name__)

ALREADY_PAID = "already_paid"
NOW_PAID = "now_paid"
NOT_FOUND = "not_found"


def _parse_order_id(order_id):
    if isinstance(order_id, uuid.UUID):
        return order_id
    try:
        return uuid.UUID(str(order_id).strip())
    except (TypeError, ValueError, AttributeError):
        return None


def try_mark_paid(order_id, *, source: str = "") -> str:
    """
    Idempotent pending -> paid.

    Returns ALREADY_PAID | NOW_PAID | NOT_FOUND.
    Raises InvalidPaymentTransitionError when the order already failed.
    """
    pk = _parse_order_id(order_id)
    if pk is None:
        logger.warning("Mark paid: malformed order id", extra={"order_id": str(order_id), "source": source})
        return NOT_FOUND

    now = timezone.now()
    with transaction.atomic():
        updated = Order.objects.filter(pk=pk, payment_status=Order.PAYMENT_PENDING).update(
            payment_status=Order.PAYMENT_PAID,
            paid_at=now,
            updated_at=now,
        )

        if updated:
            notifications.notify_payment_succeeded(pk)
            logger.info("Order marked paid", extra={"order_id": str(pk), "source": source})
            return NOW_PAID

        current = Order.objects.filter(pk=pk).values_list("payment_status", flat=True).first()

    if current is None:
        logger.warning("Mark paid: order not found", extra={"order_id": str(pk), "source": source})
        return NOT_FOUND

    if current == Order.PAYMENT_PAID:
        logger.info("Mark paid: already paid (no-op)", extra={"order_id": str(pk), "source": source})
        return ALREADY_PAID

    raise InvalidPaymentTransitionError(f"Order {pk} payment cannot move from '{current}' to 'paid'")


def set_payment_status(*, order_id, payment_status: str, actor=None) -> Order:
    """
    Manual reconciliation (e.g. COD collected, or a payment that failed).

    - paid     -> try_mark_paid (idempotent)
    - failed   -> pending -> failed only
    - same state is a no-op
    """
    valid = {choice for choice, _ in Order.PAYMENT_STATUS_CHOICES}
    if payment_status not in valid:
        raise OrderValidationError(f"Invalid payment status: {payment_status}")

    source = f"manual:{getattr(actor, 'pk', '')}"

    if payment_status == Order.PAYMENT_PAID:
        outcome = try_mark_paid(order_id, source=source)
        if outcome == NOT_FOUND:
            raise OrderNotFoundError("Order not found")
        return Order.objects.get(pk=order_id)

    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise OrderNotFoundError("Order not found")

        validate_payment_transition(order=order, target_status=payment_status)

        if order.payment_status != payment_status:
            order.payment_status = payment_status
            order.save(update_fields=["payment_status", "updated_at"])
            logger.info(
                "Order payment status set",
                extra={"order_id": str(order.id), "payment_status": payment_status, "source": source},
            )

    return order


def confirm_upi_payment(*, order_id, user) -> tuple[Order, str]:
    """
    Client-confirmed UPI: the payer asserts they paid. No network check.
    Only the order owner, only for paymentMethod=upi.
    """
    order = Order.objects.filter(pk=order_id, user=user).first()
    if order is None:
        raise OrderNotFoundError("Order not found")

    if order.payment_method != Order.METHOD_UPI:
        raise OrderValidationError("Only UPI orders can be confirmed by the customer")

    outcome = try_mark_paid(order.id, source="upi_client")
    order.refresh_from_db()
    return order, outcome
