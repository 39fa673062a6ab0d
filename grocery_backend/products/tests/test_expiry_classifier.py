# products/tests/test_expiry_classifier.py

from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from products.apps import validate_catalog_settings
from products.services.expiry import (
    ExpiryClassification,
    classify,
    classify_with_settings,
    configured_discount_percent,
    days_until_expiry,
    near_expiry_cutoff,
)

D = date(2026, 3, 10)
PCT = Decimal("20")


class ExpiryClassifierTests(SimpleTestCase):
    """
    Expiry classifier tests.

    GUARANTEES:
    - Pure and deterministic
    - Window boundary is inclusive (D+7 near, D+8 not)
    - Already expired stock stays flagged and discounted
    - Missing expiry date is never near expiry
    """

    def test_no_expiry_date_is_never_near_expiry(self):
        result = classify(None, D, 7, PCT)
        self.assertEqual(result, ExpiryClassification(near_expiry=False, discount_percent=Decimal("0.00")))

    def test_boundary_day_is_near_expiry(self):
        result = classify(D + timedelta(days=7), D, 7, PCT)
        self.assertTrue(result.near_expiry)
        self.assertEqual(result.discount_percent, Decimal("20.00"))

    def test_day_after_boundary_is_not_near_expiry(self):
        result = classify(D + timedelta(days=8), D, 7, PCT)
        self.assertFalse(result.near_expiry)
        self.assertEqual(result.discount_percent, Decimal("0"))

    def test_already_expired_stays_near_expiry(self):
        result = classify(D - timedelta(days=1), D, 7, PCT)
        self.assertTrue(result.near_expiry)
        self.assertEqual(result.discount_percent, Decimal("20.00"))

    def test_expires_today_is_near_expiry(self):
        self.assertTrue(classify(D, D, 7, PCT).near_expiry)

    def test_same_inputs_same_output(self):
        expiry = D + timedelta(days=3)
        self.assertEqual(classify(expiry, D, 7, PCT), classify(expiry, D, 7, PCT))

    def test_time_of_day_is_ignored(self):
        late = datetime(2026, 3, 17, 23, 59, tzinfo=dt_timezone.utc)
        early = datetime(2026, 3, 10, 0, 1, tzinfo=dt_timezone.utc)

        with self.settings(TIME_ZONE="UTC"):
            self.assertEqual(days_until_expiry(late, early), 7)
            self.assertTrue(classify(late, early, 7, PCT).near_expiry)

    def test_zero_day_window_only_flags_today_and_past(self):
        self.assertTrue(classify(D, D, 0, PCT).near_expiry)
        self.assertFalse(classify(D + timedelta(days=1), D, 0, PCT).near_expiry)

    def test_invalid_discount_percent_rejected(self):
        with self.assertRaises(ValueError):
            classify(D, D, 7, Decimal("120"))

        with self.assertRaises(ValueError):
            classify(D, D, 7, "abc")

    def test_cutoff_agrees_with_classifier(self):
        cutoff = near_expiry_cutoff(D, 7)
        for offset in range(-3, 12):
            expiry = D + timedelta(days=offset)
            self.assertEqual(expiry < cutoff, classify(expiry, D, 7, PCT).near_expiry, offset)

    @override_settings(
        CATALOG={
            "NEAR_EXPIRY_DAYS": 3,
            "NEAR_EXPIRY_DISCOUNT_PERCENT": "35",
        }
    )
    def test_settings_driven_classification(self):
        near = classify_with_settings(D + timedelta(days=3), as_of=D)
        far = classify_with_settings(D + timedelta(days=4), as_of=D)

        self.assertTrue(near.near_expiry)
        self.assertEqual(near.discount_percent, Decimal("35.00"))
        self.assertFalse(far.near_expiry)


class DiscountPercentSettingTests(SimpleTestCase):
    """
    GUARANTEES:
    - A malformed NEAR_EXPIRY_DISCOUNT_PERCENT is a configuration error
    - It is caught by the startup check, not on the first pricing call
    """

    def test_out_of_range_and_non_numeric_rejected(self):
        for raw in ("150", "-5", "abc", "NaN", ""):
            with self.subTest(raw=raw):
                with override_settings(CATALOG={"NEAR_EXPIRY_DISCOUNT_PERCENT": raw}):
                    with self.assertRaises(ImproperlyConfigured):
                        configured_discount_percent()

                    with self.assertRaises(ImproperlyConfigured):
                        validate_catalog_settings()

    @override_settings(CATALOG={"NEAR_EXPIRY_DISCOUNT_PERCENT": "12.5", "NEAR_EXPIRY_SWEEP_TIME": "03:30"})
    def test_valid_settings_pass_startup_check(self):
        validate_catalog_settings()
        self.assertEqual(configured_discount_percent(), Decimal("12.50"))

    @override_settings(CATALOG={"NEAR_EXPIRY_DISCOUNT_PERCENT": "20", "NEAR_EXPIRY_SWEEP_TIME": "noon"})
    def test_bad_sweep_time_fails_startup_check(self):
        with self.assertRaises(ImproperlyConfigured):
            validate_catalog_settings()
