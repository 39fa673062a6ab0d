# orders/services/fulfillment.py

import logging

from django.db import transaction

from orders.models import Order
from orders.services.exceptions import OrderNotFoundError, OrderValidationError
from orders.services.lifecycle import validate_fulfillment_transition

logger = logging.getLogger(__name__)


@transaction.atomic
def update_fulfillment_status(*, order_id, status: str, actor=None) -> Order:
    """
    Back-office fulfillment transition (orders.manage capability).
    """
    valid = {choice for choice, _ in Order.STATUS_CHOICES}
    if status not in valid:
        raise OrderValidationError(f"Invalid order status: {status}")

    order = Order.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError("Order not found")

    validate_fulfillment_transition(order=order, target_status=status)

    previous = order.status
    order.status = status
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order status updated",
        extra={
            "order_id": str(order.id),
            "from": previous,
            "to": status,
            "actor_id": str(getattr(actor, "pk", "")),
        },
    )
    return order
