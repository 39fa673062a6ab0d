# products/models/product.py

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .category import Category

TWOPLACES = Decimal("0.01")
HUNDRED = Decimal("100")


class Product(models.Model):
    """
    Represents a sellable grocery product.

    DISCOUNT MODEL (IMPORTANT):
    - near_expiry / discount_percent are DERIVED state owned by the expiry
      classifier (products/services/expiry.py). User edits never write them.
    - discount_percent is nonzero only while near_expiry is True.
    - effective_price is what a cart snapshots at add-time.

    LIFECYCLE:
    - Soft-deleted via is_active=False; never physically removed once orders
      reference it (orders keep their own line snapshots).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")

    # List price (before any near-expiry discount)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    stock = models.PositiveIntegerField(default=0)

    image_url = models.URLField(max_length=500, blank=True, default="")

    expiry_date = models.DateField(null=True, blank=True, db_index=True)

    # Derived by the expiry classifier only
    near_expiry = models.BooleanField(default=False, db_index=True)
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(HUNDRED)],
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "near_expiry"], name="product_active_near_idx"),
            models.Index(fields=["is_active", "expiry_date"], name="product_active_expiry_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(near_expiry=True) | models.Q(discount_percent=0),
                name="chk_product_discount_only_when_near_expiry",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.price is None or Decimal(self.price) <= 0:
            raise ValidationError({"price": "Price must be greater than zero"})

        if not self.near_expiry and Decimal(self.discount_percent or 0) != 0:
            raise ValidationError(
                {"discount_percent": "discount_percent must be 0 unless the product is near expiry"}
            )

    @property
    def has_active_discount(self) -> bool:
        return bool(self.near_expiry) and Decimal(self.discount_percent or 0) > 0

    @property
    def effective_price(self) -> Decimal:
        """
        price * (1 - discount_percent/100) while a near-expiry discount is
        active, else the list price. Rounded half-up to paise.
        """
        price = Decimal(self.price)
        if not self.has_active_discount:
            return price.quantize(TWOPLACES, rounding=ROUND_HALF_UP)

        factor = Decimal("1") - (Decimal(self.discount_percent) / HUNDRED)
        return (price * factor).quantize(TWOPLACES, rounding=ROUND_HALF_UP)

    def is_low_stock(self, threshold: int = 10) -> bool:
        return int(self.stock or 0) <= int(threshold)
