# orders/services/order_service.py

"""
======================================================
PATH: orders/services/order_service.py
======================================================
CHECKOUT / ORDER CREATION

Flow (place_order_from_cart):
1) snapshot the caller's cart into order line dicts
2) reject an empty cart (EmptyCartError)
3) compute server-authoritative totals
4) insert ONE Order row (status=pending, payment_status=pending)
5) after commit, best-effort: send "order received", clear the cart

Step 5 is never part of the order's transaction: an order that exists
is never rolled back because a cart clear or an email failed.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import transaction

from cart.models import Cart, CartItem
from cart.services.cart_pricing import clear_cart
from orders.models import Order
from orders.services import notifications
from orders.services.exceptions import EmptyCartError, OrderValidationError

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

SHIPPING_ADDRESS_FIELDS = (
    "fullName",
    "phone",
    "addressLine1",
    "addressLine2",
    "city",
    "state",
    "pincode",
)


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    try:
        return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise OrderValidationError(f"Invalid amount: {v!r}") from exc


# ------------------------------------------------------------
# SNAPSHOTS
# ------------------------------------------------------------

def snapshot_cart_lines(*, cart: Cart) -> list[dict]:
    """
    Immutable order line snapshots from cart price_at_add values.
    """
    lines = []
    items = CartItem.objects.filter(cart=cart).select_related("product").order_by("created_at")
    for item in items:
        price = _money(item.price_at_add)
        qty = int(item.quantity)
        lines.append(
            {
                "productId": str(item.product_id),
                "productName": item.product.name,
                "quantity": qty,
                "priceAtOrder": str(price),
                "totalPrice": str(_money(price * qty)),
            }
        )
    return lines


def compute_totals(*, lines: list[dict], shipping_amount=ZERO, discount_amount=ZERO) -> dict:
    """
    total = subtotal + shipping - discount

    Rules:
    - shipping and discount are non-negative
    - discount cannot exceed subtotal + shipping
    """
    subtotal = sum((_money(line["totalPrice"]) for line in lines), ZERO)
    shipping = _money(shipping_amount)
    discount = _money(discount_amount)

    if shipping < 0:
        raise OrderValidationError("shippingAmount cannot be negative")
    if discount < 0:
        raise OrderValidationError("discountAmount cannot be negative")
    if discount > subtotal + shipping:
        raise OrderValidationError("discountAmount cannot exceed the order amount")

    return {
        "subtotal_amount": subtotal,
        "shipping_amount": shipping,
        "discount_amount": discount,
        "total_amount": _money(subtotal + shipping - discount),
    }


def normalize_shipping_address(address: dict) -> dict:
    address = address or {}
    return {field: str(address.get(field) or "").strip() for field in SHIPPING_ADDRESS_FIELDS}


# ------------------------------------------------------------
# CREATE
# ------------------------------------------------------------

def create_order(
    *,
    user,
    items: list[dict],
    shipping_address: dict,
    payment_method: str,
    totals: dict,
) -> Order:
    """
    Insert one pending order. `items` must be non-empty (caller derives
    them from the cart).
    """
    if not items:
        raise EmptyCartError("Cart is empty")

    valid_methods = {choice for choice, _ in Order.PAYMENT_METHOD_CHOICES}
    if payment_method not in valid_methods:
        raise OrderValidationError(f"Unsupported payment method: {payment_method}")

    with transaction.atomic():
        order = Order.objects.create(
            user=user,
            items=items,
            shipping_address=normalize_shipping_address(shipping_address),
            payment_method=payment_method,
            status=Order.STATUS_PENDING,
            payment_status=Order.PAYMENT_PENDING,
            subtotal_amount=totals["subtotal_amount"],
            shipping_amount=totals["shipping_amount"],
            discount_amount=totals["discount_amount"],
            total_amount=totals["total_amount"],
        )
        notifications.notify_order_created(order.id)

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.id),
            "user_id": str(user.pk),
            "payment_method": payment_method,
            "total_amount": str(order.total_amount),
            "lines": len(items),
        },
    )
    return order


def _clear_cart_best_effort(*, user, order_id):
    try:
        clear_cart(user=user)
    except Exception:
        logger.exception("Cart clear after order failed", extra={"order_id": str(order_id), "user_id": str(user.pk)})


def place_order_from_cart(
    *,
    user,
    shipping_address: dict,
    payment_method: str,
    shipping_amount=ZERO,
    discount_amount=ZERO,
) -> Order:
    cart = Cart.objects.filter(user=user).first()
    lines = snapshot_cart_lines(cart=cart) if cart else []
    if not lines:
        raise EmptyCartError("Cart is empty")

    totals = compute_totals(lines=lines, shipping_amount=shipping_amount, discount_amount=discount_amount)

    order = create_order(
        user=user,
        items=lines,
        shipping_address=shipping_address,
        payment_method=payment_method,
        totals=totals,
    )

    transaction.on_commit(lambda: _clear_cart_best_effort(user=user, order_id=order.id))
    return order
