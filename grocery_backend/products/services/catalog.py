# products/services/catalog.py

"""
CATALOG WRITE SERVICES

Purpose:
- The only entry points that create/update/deactivate products.
- Every create/update runs the expiry classifier in the same transaction, so
  a product saved with a near-term expiry is discounted immediately instead
  of waiting for the next sweep.
"""

from __future__ import annotations

import logging

from django.db import transaction

from products.models import Product
from products.services.near_expiry import apply_expiry_classification

logger = logging.getLogger(__name__)

# Derived fields: never accepted from callers
PROTECTED_FIELDS = {"id", "near_expiry", "discount_percent", "created_at", "updated_at"}


def _writable(data: dict) -> dict:
    return {k: v for k, v in (data or {}).items() if k not in PROTECTED_FIELDS}


@transaction.atomic
def create_product(*, data: dict, as_of=None) -> Product:
    product = Product(**_writable(data))
    apply_expiry_classification(product, as_of=as_of)
    product.full_clean()
    product.save()

    logger.info(
        "Product created",
        extra={
            "product_id": str(product.id),
            "near_expiry": product.near_expiry,
            "discount_percent": str(product.discount_percent),
        },
    )
    return product


@transaction.atomic
def update_product(*, product: Product, data: dict, as_of=None) -> Product:
    product = Product.objects.select_for_update().get(pk=product.pk)

    for field, value in _writable(data).items():
        setattr(product, field, value)

    apply_expiry_classification(product, as_of=as_of)
    product.full_clean()
    product.save()

    logger.info(
        "Product updated",
        extra={
            "product_id": str(product.id),
            "near_expiry": product.near_expiry,
            "discount_percent": str(product.discount_percent),
        },
    )
    return product


@transaction.atomic
def deactivate_product(*, product: Product) -> Product:
    """
    Soft delete. Orders keep referencing the product by snapshot.
    """
    updated = Product.objects.filter(pk=product.pk, is_active=True).update(is_active=False)
    product.refresh_from_db()

    if updated:
        logger.info("Product deactivated", extra={"product_id": str(product.id)})

    return product
