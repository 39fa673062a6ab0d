from .fulfillment import update_fulfillment_status
from .order_service import compute_totals, create_order, place_order_from_cart, snapshot_cart_lines
from .payment_confirmation import (
    ALREADY_PAID,
    NOT_FOUND,
    NOW_PAID,
    confirm_upi_payment,
    set_payment_status,
    try_mark_paid,
)

__all__ = [
    "snapshot_cart_lines",
    "compute_totals",
    "create_order",
    "place_order_from_cart",
    "update_fulfillment_status",
    "try_mark_paid",
    "set_payment_status",
    "confirm_upi_payment",
    "ALREADY_PAID",
    "NOW_PAID",
    "NOT_FOUND",
]
