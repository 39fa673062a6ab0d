# cart/models/cart_item.py

"""
CART ITEM MODEL

Purpose:
- One line per (cart, product).
- price_at_add is the product's effective price (post near-expiry discount)
  captured when the line was created.

Rules:
- price_at_add is a SNAPSHOT: later catalog price/discount changes never
  touch it, and re-adding the same product only increments quantity.
- Quantity is >= 1; setting it to 0 removes the line (service layer).
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product

from .cart import Cart


class CartItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    cart = models.ForeignKey(
        Cart,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="cart_items",
    )

    quantity = models.PositiveIntegerField(help_text="Must be at least 1")

    price_at_add = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Effective unit price snapshot at time of add (server-controlled)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["cart", "product"],
                name="unique_product_per_cart",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="chk_cart_item_quantity_positive",
            ),
        ]

    def clean(self):
        if self.quantity is None or int(self.quantity) < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1"})

        if self.price_at_add is None or self.price_at_add <= 0:
            raise ValidationError({"price_at_add": "Price must be greater than zero"})

    @property
    def line_total(self) -> Decimal:
        return (self.price_at_add or Decimal("0.00")) * Decimal(int(self.quantity or 0))

    def __str__(self):
        return f"{getattr(self.product, 'name', 'Product')} x {self.quantity}"
