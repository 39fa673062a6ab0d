# products/tests/test_near_expiry.py

from datetime import timedelta
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from products.models import Category, Product
from products.services.catalog import create_product, deactivate_product, update_product
from products.services.near_expiry import sweep_near_expiry


class CatalogHookTests(TestCase):
    """
    Synchronous classifier hook on create/update.

    GUARANTEES:
    - A product saved with a near-term expiry is discounted immediately
    - Moving expiry out of the window revokes the discount
    - Clients can never set near_expiry / discount_percent directly
    """

    def setUp(self):
        self.today = timezone.localdate()
        self.category = Category.objects.create(name="Dairy")

    def test_create_with_near_term_expiry_is_flagged(self):
        product = create_product(
            data={
                "name": "Milk",
                "category": self.category,
                "price": Decimal("100.00"),
                "stock": 5,
                "expiry_date": self.today + timedelta(days=3),
            }
        )

        product.refresh_from_db()
        self.assertTrue(product.near_expiry)
        self.assertEqual(product.discount_percent, Decimal("20.00"))
        self.assertEqual(product.effective_price, Decimal("80.00"))

    def test_create_without_expiry_is_not_flagged(self):
        product = create_product(data={"name": "Rice", "price": Decimal("50.00")})
        self.assertFalse(product.near_expiry)
        self.assertEqual(product.discount_percent, Decimal("0.00"))
        self.assertEqual(product.effective_price, Decimal("50.00"))

    def test_update_reevaluates_both_directions(self):
        product = create_product(
            data={"name": "Bread", "price": Decimal("40.00"), "expiry_date": self.today + timedelta(days=2)}
        )
        self.assertTrue(product.near_expiry)

        product = update_product(product=product, data={"expiry_date": self.today + timedelta(days=30)})
        product.refresh_from_db()
        self.assertFalse(product.near_expiry)
        self.assertEqual(product.discount_percent, Decimal("0.00"))

        product = update_product(product=product, data={"expiry_date": self.today + timedelta(days=1)})
        product.refresh_from_db()
        self.assertTrue(product.near_expiry)

    def test_derived_fields_in_payload_are_ignored(self):
        product = create_product(
            data={
                "name": "Cheese",
                "price": Decimal("200.00"),
                "expiry_date": self.today + timedelta(days=60),
                "near_expiry": True,
                "discount_percent": Decimal("50"),
            }
        )
        self.assertFalse(product.near_expiry)
        self.assertEqual(product.discount_percent, Decimal("0.00"))

    def test_invalid_price_rejected(self):
        with self.assertRaises(ValidationError):
            create_product(data={"name": "Free", "price": Decimal("0.00")})

    def test_soft_delete_keeps_row(self):
        product = create_product(data={"name": "Jam", "price": Decimal("90.00")})
        deactivate_product(product=product)

        product.refresh_from_db()
        self.assertFalse(product.is_active)
        self.assertTrue(Product.objects.filter(pk=product.pk).exists())

    def test_database_rejects_discount_without_flag(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(
                    name="Broken",
                    price=Decimal("10.00"),
                    near_expiry=False,
                    discount_percent=Decimal("10.00"),
                )


class NearExpirySweepTests(TestCase):
    """
    Daily sweep tests.

    GUARANTEES:
    - Flags only active, non-flagged products inside the window
    - One-directional (never revokes)
    - Idempotent: a second run updates nothing
    """

    def setUp(self):
        self.today = timezone.localdate()

    def _product(self, name, days, **kwargs):
        # Bypass the hook to simulate products that drifted into the window
        return Product.objects.create(
            name=name,
            price=Decimal("100.00"),
            expiry_date=(self.today + timedelta(days=days)) if days is not None else None,
            **kwargs,
        )

    def test_sweep_flags_products_entering_window(self):
        inside = self._product("Inside", 7)
        boundary_out = self._product("Outside", 8)
        expired = self._product("Expired", -1)
        no_expiry = self._product("No expiry", None)
        inactive = self._product("Inactive", 1, is_active=False)

        updated = sweep_near_expiry(as_of=self.today)
        self.assertEqual(updated, 2)

        for product in (inside, boundary_out, expired, no_expiry, inactive):
            product.refresh_from_db()

        self.assertTrue(inside.near_expiry)
        self.assertEqual(inside.discount_percent, Decimal("20.00"))
        self.assertTrue(expired.near_expiry)
        self.assertFalse(boundary_out.near_expiry)
        self.assertFalse(no_expiry.near_expiry)
        self.assertFalse(inactive.near_expiry)

    def test_sweep_is_idempotent(self):
        self._product("Yogurt", 2)

        self.assertEqual(sweep_near_expiry(as_of=self.today), 1)
        self.assertEqual(sweep_near_expiry(as_of=self.today), 0)

    def test_sweep_never_revokes(self):
        product = self._product("Flagged", 30, near_expiry=True, discount_percent=Decimal("20.00"))

        sweep_near_expiry(as_of=self.today)

        product.refresh_from_db()
        self.assertTrue(product.near_expiry)
        self.assertEqual(product.discount_percent, Decimal("20.00"))

    def test_later_as_of_picks_up_more_products(self):
        self._product("Soon", 10)

        self.assertEqual(sweep_near_expiry(as_of=self.today), 0)
        self.assertEqual(sweep_near_expiry(as_of=self.today + timedelta(days=3)), 1)

    def test_management_command(self):
        self._product("Soon", 1)
        out = StringIO()

        call_command("sweep_near_expiry", stdout=out)

        self.assertIn("flagged 1 product", out.getvalue())
        self.assertEqual(Product.objects.filter(near_expiry=True).count(), 1)
