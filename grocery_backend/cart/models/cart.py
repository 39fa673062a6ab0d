"""
PATH: cart/models/cart.py

CART MODEL

Purpose:
- The storefront shopping cart: exactly one per user, created lazily on
  first access (see cart.services.cart_pricing.get_or_create_cart).
- Totals are derived from CartItem snapshots, never from live product prices.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import F, Sum

User = settings.AUTH_USER_MODEL


class Cart(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="cart",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    @property
    def item_count(self) -> int:
        total = self.items.aggregate(total=Sum("quantity")).get("total")
        return int(total or 0)

    @property
    def subtotal_amount(self) -> Decimal:
        total = (
            self.items.annotate(line_total=F("quantity") * F("price_at_add"))
            .aggregate(total=Sum("line_total"))
            .get("total")
        )
        return Decimal(total or 0).quantize(Decimal("0.01"))

    @property
    def is_empty(self) -> bool:
        return not self.items.exists()

    def __str__(self):
        return f"Cart {self.id} | {self.user}"
