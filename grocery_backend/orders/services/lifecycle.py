"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed transitions for both order state
machines.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from orders.models import Order
from orders.services.exceptions import (
    InvalidPaymentTransitionError,
    InvalidStatusTransitionError,
)

# ============================================================
# FULFILLMENT
# ============================================================

FULFILLMENT_TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
    Order.STATUS_CANCELLED,
}

FULFILLMENT_TRANSITIONS = {
    Order.STATUS_PENDING: {Order.STATUS_CONFIRMED, Order.STATUS_CANCELLED},
    Order.STATUS_CONFIRMED: {Order.STATUS_SHIPPED, Order.STATUS_CANCELLED},
    Order.STATUS_SHIPPED: {Order.STATUS_DELIVERED, Order.STATUS_CANCELLED},
}


def can_transition_fulfillment(*, from_status: str, to_status: str) -> bool:
    if from_status in FULFILLMENT_TERMINAL_STATES:
        return False

    return to_status in FULFILLMENT_TRANSITIONS.get(from_status, set())


def validate_fulfillment_transition(*, order: Order, target_status: str):
    if not can_transition_fulfillment(from_status=order.status, to_status=target_status):
        raise InvalidStatusTransitionError(
            f"Order {order.id} cannot move from '{order.status}' to '{target_status}'"
        )


# ============================================================
# PAYMENT
# ============================================================

PAYMENT_TERMINAL_STATES = {
    Order.PAYMENT_PAID,
    Order.PAYMENT_FAILED,
}

PAYMENT_TRANSITIONS = {
    Order.PAYMENT_PENDING: {Order.PAYMENT_PAID, Order.PAYMENT_FAILED},
}


def is_payment_noop(*, from_status: str, to_status: str) -> bool:
    """Same-state requests are accepted and change nothing."""
    return from_status == to_status


def can_transition_payment(*, from_status: str, to_status: str) -> bool:
    if is_payment_noop(from_status=from_status, to_status=to_status):
        return True

    if from_status in PAYMENT_TERMINAL_STATES:
        return False

    return to_status in PAYMENT_TRANSITIONS.get(from_status, set())


def validate_payment_transition(*, order: Order, target_status: str):
    if not can_transition_payment(from_status=order.payment_status, to_status=target_status):
        raise InvalidPaymentTransitionError(
            f"Order {order.id} payment cannot move from '{order.payment_status}' to '{target_status}'"
        )
