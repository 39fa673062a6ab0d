# products/services/near_expiry.py

"""
======================================================
PATH: products/services/near_expiry.py
======================================================
NEAR-EXPIRY DISCOUNT WRITERS

Two writers, one classifier:
- apply_expiry_classification(): per-product hook run inside product
  create/update. Re-evaluates BOTH directions (flag + revoke).
- sweep_near_expiry(): daily bulk UPDATE. ONE direction only: flags active
  products that newly entered the window. It never revokes.

Rules:
- Carts and orders never write Product; only these functions touch
  near_expiry / discount_percent.
- The sweep is a single idempotent UPDATE ... WHERE, safe to re-run or to
  overlap with another sweep.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.utils import timezone

from products.models import Product
from products.services.expiry import (
    classify,
    configured_discount_percent,
    configured_threshold_days,
    near_expiry_cutoff,
)

logger = logging.getLogger(__name__)


def apply_expiry_classification(product: Product, *, as_of=None) -> list[str]:
    """
    Set near_expiry/discount_percent on an in-memory product.

    Returns the list of changed field names (empty when already consistent),
    suitable for save(update_fields=...).
    """
    result = classify(
        product.expiry_date,
        as_of or timezone.localdate(),
        configured_threshold_days(),
        configured_discount_percent(),
    )

    changed = []
    if bool(product.near_expiry) != result.near_expiry:
        product.near_expiry = result.near_expiry
        changed.append("near_expiry")

    if Decimal(product.discount_percent or 0) != result.discount_percent:
        product.discount_percent = result.discount_percent
        changed.append("discount_percent")

    return changed


def sweep_near_expiry(*, as_of=None, threshold_days=None, discount_percent=None) -> int:
    """
    Flag every active product whose expiry entered the near-expiry window.

    Scope: is_active AND expiry_date < cutoff AND near_expiry = False
    Returns the number of rows updated.
    """
    today = as_of or timezone.localdate()
    days = configured_threshold_days() if threshold_days is None else int(threshold_days)
    pct = configured_discount_percent() if discount_percent is None else Decimal(str(discount_percent))

    cutoff = near_expiry_cutoff(today, days)

    updated = Product.objects.filter(
        is_active=True,
        expiry_date__isnull=False,
        expiry_date__lt=cutoff,
        near_expiry=False,
    ).update(
        near_expiry=True,
        discount_percent=pct,
        updated_at=timezone.now(),
    )

    logger.info(
        "Near-expiry sweep completed",
        extra={
            "as_of": str(today),
            "threshold_days": days,
            "discount_percent": str(pct),
            "updated": updated,
        },
    )
    return updated


def near_expiry_products():
    return Product.objects.filter(is_active=True, near_expiry=True).order_by("expiry_date", "name")
