from .catalog import create_product, deactivate_product, update_product
from .expiry import ExpiryClassification, classify
from .near_expiry import apply_expiry_classification, sweep_near_expiry

__all__ = [
    "ExpiryClassification",
    "classify",
    "apply_expiry_classification",
    "sweep_near_expiry",
    "create_product",
    "update_product",
    "deactivate_product",
]
