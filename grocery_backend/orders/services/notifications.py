# orders/services/notifications.py

"""
======================================================
PATH: orders/services/notifications.py
======================================================
NOTIFICATION SINK (best-effort side-channel)

Events:
- order.created      -> "Order received" email
- payment.succeeded  -> "Payment received" email (only on pending -> paid)

Contract:
- notify() registers the send with transaction.on_commit, so nothing goes
  out for a rolled-back write.
- With settings.NOTIFICATIONS["ASYNC"] the send runs in a daemon thread,
  off the request; otherwise inline after commit.
- Delivery failures are logged and never propagate to the caller.
"""

from __future__ import annotations

import logging
import threading

from django.conf import settings
from django.core.mail import send_mail
from django.db import connections, transaction

from orders.models import Order

logger = logging.getLogger(__name__)

EVENT_ORDER_CREATED = "order.created"
EVENT_PAYMENT_SUCCEEDED = "payment.succeeded"


def _is_async() -> bool:
    cfg = getattr(settings, "NOTIFICATIONS", {}) or {}
    return bool(cfg.get("ASYNC", False))


def _recipient(order: Order) -> str:
    return (getattr(order.user, "email", "") or "").strip()


def _greeting(order: Order) -> str:
    user = order.user
    name = getattr(user, "display_name", "") or getattr(user, "email", "")
    return f"Hi {name},"


def _order_lines(order: Order) -> str:
    lines = []
    for item in order.items or []:
        lines.append(
            f"- {item.get('productName')} x {item.get('quantity')} @ {item.get('priceAtOrder')}"
            f" = {item.get('totalPrice')}"
        )
    return "\n".join(lines)


def _order_created(order: Order):
    send_mail(
        subject=f"Order received: {order.id}",
        message=(
            f"{_greeting(order)}\n\n"
            f"We received your order {order.id}.\n\n"
            f"{_order_lines(order)}\n\n"
            f"Total: {order.total_amount}\n"
            f"Payment method: {order.get_payment_method_display()}\n"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[_recipient(order)],
        fail_silently=False,
    )


def _payment_succeeded(order: Order):
    send_mail(
        subject=f"Payment received: {order.id}",
        message=(
            f"{_greeting(order)}\n\n"
            f"Payment of {order.total_amount} for order {order.id} has been received.\n"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[_recipient(order)],
        fail_silently=False,
    )


HANDLERS = {
    EVENT_ORDER_CREATED: _order_created,
    EVENT_PAYMENT_SUCCEEDED: _payment_succeeded,
}


def deliver(event: str, order_id) -> bool:
    """
    Send one notification now. Returns True when handed to the mail backend.
    """
    handler = HANDLERS.get(event)
    if handler is None:
        logger.warning("Unknown notification event", extra={"event": event})
        return False

    try:
        order = Order.objects.select_related("user").filter(pk=order_id).first()
        if order is None:
            logger.warning("Notification skipped: order missing", extra={"event": event, "order_id": str(order_id)})
            return False

        if not _recipient(order):
            logger.info("Notification skipped: no recipient", extra={"event": event, "order_id": str(order_id)})
            return False

        handler(order)
        logger.info("Notification sent", extra={"event": event, "order_id": str(order_id)})
        return True
    except Exception:
        logger.exception("Notification delivery failed", extra={"event": event, "order_id": str(order_id)})
        return False


def _deliver_in_thread(event: str, order_id):
    try:
        deliver(event, order_id)
    finally:
        # thread-local connections only
        connections.close_all()


def _dispatch(event: str, order_id):
    if _is_async():
        threading.Thread(
            target=_deliver_in_thread,
            args=(event, order_id),
            name=f"notify-{event}",
            daemon=True,
        ).start()
        return

    deliver(event, order_id)


def notify(event: str, order_id) -> None:
    """
    Fire-and-forget: queue `event` for `order_id` after the current
    transaction commits (immediately when there is none).
    """
    transaction.on_commit(lambda: _dispatch(event, order_id))


def notify_order_created(order_id) -> None:
    notify(EVENT_ORDER_CREATED, order_id)


def notify_payment_succeeded(order_id) -> None:
    notify(EVENT_PAYMENT_SUCCEEDED, order_id)
