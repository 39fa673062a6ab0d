# cart/services/cart_pricing.py

"""
======================================================
PATH: cart/services/cart_pricing.py
======================================================
CART PRICING SERVICE

Rules:
- The cart READS product state (is_active, effective_price); it never
  writes to Product.
- add_to_cart snapshots product.effective_price into price_at_add on the
  first add only. Re-adding merges quantity, the snapshot is kept.
- update_cart_item sets quantity directly (no re-snapshot); quantity <= 0
  deletes the line.
- Every mutation is atomic: a failure leaves the cart untouched.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import F

from cart.models import Cart, CartItem
from cart.services.exceptions import (
    CartItemNotFoundError,
    InvalidQuantityError,
    ProductUnavailableError,
)
from products.models import Product

logger = logging.getLogger(__name__)


def _as_int(value, *, field: str = "quantity") -> int:
    if isinstance(value, bool):
        raise InvalidQuantityError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidQuantityError(f"{field} must be an integer") from exc


def get_or_create_cart(*, user) -> Cart:
    """
    Lazily create the user's single cart.
    """
    cart, created = Cart.objects.get_or_create(user=user)

    if created:
        logger.info("Cart created", extra={"user_id": str(user.pk), "cart_id": str(cart.id)})
    return cart


def get_cart(*, user) -> Cart:
    cart = get_or_create_cart(user=user)
    return Cart.objects.prefetch_related("items__product").get(pk=cart.pk)


@transaction.atomic
def add_to_cart(*, user, product_id, quantity) -> CartItem:
    qty = _as_int(quantity)
    if qty < 1:
        raise InvalidQuantityError("quantity must be at least 1")

    product = Product.objects.filter(id=product_id, is_active=True).first()
    if product is None:
        raise ProductUnavailableError("Product not found")

    cart = get_or_create_cart(user=user)

    item, created = CartItem.objects.get_or_create(
        cart=cart,
        product=product,
        defaults={
            "quantity": qty,
            "price_at_add": product.effective_price,  # snapshot
        },
    )

    if not created:
        # quantity only; price_at_add is deliberately left alone
        CartItem.objects.filter(pk=item.pk).update(quantity=F("quantity") + qty)
        item.refresh_from_db()

    logger.info(
        "Cart item added",
        extra={
            "cart_id": str(cart.id),
            "product_id": str(product.id),
            "quantity": item.quantity,
            "price_at_add": str(item.price_at_add),
            "merged": not created,
        },
    )
    return item


@transaction.atomic
def update_cart_item(*, user, product_id, quantity) -> Optional[CartItem]:
    """
    Returns the updated item, or None when quantity <= 0 removed it.
    """
    qty = _as_int(quantity)
    cart = get_or_create_cart(user=user)

    item = CartItem.objects.select_for_update().filter(cart=cart, product_id=product_id).first()
    if item is None:
        raise CartItemNotFoundError("Item not found in cart")

    if qty <= 0:
        item.delete()
        logger.info("Cart item removed by quantity update", extra={"cart_id": str(cart.id), "product_id": str(product_id)})
        return None

    item.quantity = qty
    item.save(update_fields=["quantity", "updated_at"])
    return item


@transaction.atomic
def remove_from_cart(*, user, product_id) -> None:
    cart = get_or_create_cart(user=user)
    deleted, _ = CartItem.objects.filter(cart=cart, product_id=product_id).delete()
    if not deleted:
        raise CartItemNotFoundError("Item not found in cart")


def clear_cart(*, user) -> int:
    """
    Delete every line in the user's cart. Idempotent; returns lines removed.
    """
    deleted, _ = CartItem.objects.filter(cart__user=user).delete()
    logger.info("Cart cleared", extra={"user_id": str(user.pk), "removed": deleted})
    return deleted
