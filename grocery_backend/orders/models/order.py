# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class Order(models.Model):
    """
    Storefront order.

    Key rules:
    - items is an immutable snapshot of the cart at creation time
      (productId, productName, quantity, priceAtOrder, totalPrice). Later
      catalog changes never alter it.
    - Two independent state machines:
        status          pending -> confirmed -> shipped -> delivered
                        (cancelled from any non-terminal state)
        payment_status  pending -> paid | failed   (both terminal)
    - Orders are never deleted, only transitioned.
    """

    # Fulfillment
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    # Payment
    PAYMENT_PENDING = "pending"
    PAYMENT_PAID = "paid"
    PAYMENT_FAILED = "failed"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_FAILED, "Failed"),
    ]

    METHOD_COD = "cod"
    METHOD_UPI = "upi"
    METHOD_CARD = "card"

    PAYMENT_METHOD_CHOICES = [
        (METHOD_COD, "Cash on delivery"),
        (METHOD_UPI, "UPI"),
        (METHOD_CARD, "Card"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    items = models.JSONField(default=list, encoder=DjangoJSONEncoder)
    shipping_address = models.JSONField(default=dict, encoder=DjangoJSONEncoder)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING
    )
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES)

    # Money fields (server authoritative)
    subtotal_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    shipping_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    # Provider order id when a gateway order was created (razorpay "order_...")
    gateway_order_id = models.CharField(max_length=64, blank=True, default="", db_index=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
            models.Index(fields=["payment_status"], name="order_payment_status_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]

    @property
    def is_paid(self) -> bool:
        return self.payment_status == self.PAYMENT_PAID

    def __str__(self):
        return f"Order {self.id} | {self.total_amount} | {self.status}/{self.payment_status}"
