# products/services/expiry.py

"""
EXPIRY CLASSIFIER

Pure function: (expiry_date, as_of, threshold_days, discount_percent)
            -> ExpiryClassification(near_expiry, discount_percent)

Rules:
- expiry_date is None            -> not near expiry, 0% discount
- days_left <= threshold_days    -> near expiry, configured discount
  (days_left is negative once expired; expired stock STAYS flagged and
  discounted until someone deactivates it)
- otherwise                      -> not near expiry, 0% discount

Only calendar dates are compared; time of day is ignored.

No database access here. The sweep and the per-product hook both go through
this function so the two paths can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

ZERO = Decimal("0.00")
TWOPLACES = Decimal("0.01")

DEFAULT_NEAR_EXPIRY_DAYS = 7
DEFAULT_DISCOUNT_PERCENT = Decimal("20")


@dataclass(frozen=True)
class ExpiryClassification:
    near_expiry: bool
    discount_percent: Decimal


NOT_NEAR_EXPIRY = ExpiryClassification(near_expiry=False, discount_percent=ZERO)


def _date_only(value) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def _to_percent(value) -> Decimal:
    try:
        pct = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError(f"discount_percent must be a decimal, got {value!r}") from exc

    if pct.is_nan():
        raise ValueError(f"discount_percent must be a decimal, got {value!r}")

    if pct < 0 or pct > 100:
        raise ValueError("discount_percent must be between 0 and 100")

    return pct.quantize(TWOPLACES)


def days_until_expiry(expiry_date, as_of) -> int:
    return (_date_only(expiry_date) - _date_only(as_of)).days


def classify(expiry_date, as_of, threshold_days: int, discount_percent) -> ExpiryClassification:
    if expiry_date is None:
        return NOT_NEAR_EXPIRY

    if days_until_expiry(expiry_date, as_of) <= int(threshold_days):
        return ExpiryClassification(near_expiry=True, discount_percent=_to_percent(discount_percent))

    return NOT_NEAR_EXPIRY


def near_expiry_cutoff(as_of, threshold_days: int) -> date:
    """
    First calendar date that is NOT near expiry for `as_of`.

    `expiry_date < cutoff` is the set-based twin of classify(): it selects
    exactly the dates classify() flags.
    """
    return _date_only(as_of) + timedelta(days=int(threshold_days) + 1)


# ---------------------------------------------------------
# CONFIG
# ---------------------------------------------------------

def configured_threshold_days() -> int:
    catalog = getattr(settings, "CATALOG", {}) or {}
    return int(catalog.get("NEAR_EXPIRY_DAYS", DEFAULT_NEAR_EXPIRY_DAYS))


def parse_discount_percent(value) -> Decimal:
    try:
        return _to_percent(value)
    except ValueError as exc:
        raise ImproperlyConfigured(
            f"NEAR_EXPIRY_DISCOUNT_PERCENT must be a number between 0 and 100, got {value!r}"
        ) from exc


def configured_discount_percent() -> Decimal:
    catalog = getattr(settings, "CATALOG", {}) or {}
    return parse_discount_percent(catalog.get("NEAR_EXPIRY_DISCOUNT_PERCENT", DEFAULT_DISCOUNT_PERCENT))


def classify_with_settings(expiry_date, *, as_of=None) -> ExpiryClassification:
    return classify(
        expiry_date,
        as_of or timezone.localdate(),
        configured_threshold_days(),
        configured_discount_percent(),
    )
