# cart/tests/test_cart_pricing.py

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from cart.models import Cart, CartItem
from cart.services.cart_pricing import (
    add_to_cart,
    clear_cart,
    get_or_create_cart,
    remove_from_cart,
    update_cart_item,
)
from cart.services.exceptions import (
    CartItemNotFoundError,
    InvalidQuantityError,
    ProductUnavailableError,
)
from products.models import Product
from products.services.catalog import create_product, update_product

User = get_user_model()


class CartPricingTests(TestCase):
    """
    Cart pricing tests.

    GUARANTEES:
    - price_at_add snapshots the effective (discounted) price
    - Snapshots never follow later catalog changes
    - Re-adding merges quantity into one line
    - quantity <= 0 on update removes the line
    - Carts never write to products
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.today = timezone.localdate()

        # price 100, expiring in 3 days => near expiry, 20% off
        self.product = create_product(
            data={"name": "Paneer", "price": Decimal("100.00"), "stock": 10, "expiry_date": self.today + timedelta(days=3)}
        )

    def test_cart_is_created_lazily_once(self):
        self.assertFalse(Cart.objects.filter(user=self.user).exists())

        first = get_or_create_cart(user=self.user)
        second = get_or_create_cart(user=self.user)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(Cart.objects.filter(user=self.user).count(), 1)

    def test_add_snapshots_discounted_price(self):
        item = add_to_cart(user=self.user, product_id=self.product.id, quantity=1)
        self.assertEqual(item.price_at_add, Decimal("80.00"))

    def test_snapshot_survives_discount_revocation(self):
        item = add_to_cart(user=self.user, product_id=self.product.id, quantity=1)

        # Expiry pushed out: discount revoked by the hook
        update_product(product=self.product, data={"expiry_date": self.today + timedelta(days=60)})
        self.product.refresh_from_db()
        self.assertEqual(self.product.effective_price, Decimal("100.00"))

        item.refresh_from_db()
        self.assertEqual(item.price_at_add, Decimal("80.00"))

        # a second add merges into the existing line and keeps the snapshot
        item = add_to_cart(user=self.user, product_id=self.product.id, quantity=1)
        self.assertEqual(item.price_at_add, Decimal("80.00"))

    def test_new_line_after_revocation_gets_new_price(self):
        other_user = User.objects.create_user(email="late@example.com", password="pass1234")
        add_to_cart(user=self.user, product_id=self.product.id, quantity=1)

        update_product(product=self.product, data={"expiry_date": self.today + timedelta(days=60)})

        late_item = add_to_cart(user=other_user, product_id=self.product.id, quantity=1)
        self.assertEqual(late_item.price_at_add, Decimal("100.00"))

    def test_snapshot_survives_price_change(self):
        item = add_to_cart(user=self.user, product_id=self.product.id, quantity=1)
        update_product(product=self.product, data={"price": Decimal("150.00")})

        item.refresh_from_db()
        self.assertEqual(item.price_at_add, Decimal("80.00"))

    def test_quantity_merge(self):
        add_to_cart(user=self.user, product_id=self.product.id, quantity=2)
        item = add_to_cart(user=self.user, product_id=self.product.id, quantity=2)

        self.assertEqual(item.quantity, 4)
        self.assertEqual(CartItem.objects.filter(cart__user=self.user).count(), 1)

    def test_add_rejects_bad_quantity(self):
        for qty in (0, -1, "two"):
            with self.assertRaises(InvalidQuantityError):
                add_to_cart(user=self.user, product_id=self.product.id, quantity=qty)

        self.assertFalse(CartItem.objects.exists())

    def test_add_rejects_unknown_or_inactive_product(self):
        inactive = Product.objects.create(name="Gone", price=Decimal("5.00"), is_active=False)

        with self.assertRaises(ProductUnavailableError):
            add_to_cart(user=self.user, product_id=inactive.id, quantity=1)

        with self.assertRaises(ProductUnavailableError):
            add_to_cart(user=self.user, product_id="00000000-0000-0000-0000-000000000000", quantity=1)

        self.assertFalse(CartItem.objects.exists())

    def test_update_sets_quantity_without_resnapshot(self):
        add_to_cart(user=self.user, product_id=self.product.id, quantity=1)
        update_product(product=self.product, data={"price": Decimal("300.00")})

        item = update_cart_item(user=self.user, product_id=self.product.id, quantity=5)

        self.assertEqual(item.quantity, 5)
        self.assertEqual(item.price_at_add, Decimal("80.00"))

    def test_update_to_zero_or_less_removes(self):
        add_to_cart(user=self.user, product_id=self.product.id, quantity=3)

        self.assertIsNone(update_cart_item(user=self.user, product_id=self.product.id, quantity=0))
        self.assertFalse(CartItem.objects.exists())

        add_to_cart(user=self.user, product_id=self.product.id, quantity=3)
        self.assertIsNone(update_cart_item(user=self.user, product_id=self.product.id, quantity=-2))
        self.assertFalse(CartItem.objects.exists())

    def test_update_missing_item(self):
        with self.assertRaises(CartItemNotFoundError):
            update_cart_item(user=self.user, product_id=self.product.id, quantity=2)

    def test_remove_and_clear(self):
        bread = create_product(data={"name": "Bread", "price": Decimal("40.00")})
        add_to_cart(user=self.user, product_id=self.product.id, quantity=1)
        add_to_cart(user=self.user, product_id=bread.id, quantity=1)

        remove_from_cart(user=self.user, product_id=bread.id)
        self.assertEqual(CartItem.objects.count(), 1)

        with self.assertRaises(CartItemNotFoundError):
            remove_from_cart(user=self.user, product_id=bread.id)

        self.assertEqual(clear_cart(user=self.user), 1)
        self.assertEqual(clear_cart(user=self.user), 0)

    def test_cart_never_writes_product(self):
        before = Product.objects.values().get(pk=self.product.pk)

        add_to_cart(user=self.user, product_id=self.product.id, quantity=4)
        update_cart_item(user=self.user, product_id=self.product.id, quantity=2)
        clear_cart(user=self.user)

        self.assertEqual(Product.objects.values().get(pk=self.product.pk), before)

    def test_subtotal_uses_snapshots(self):
        add_to_cart(user=self.user, product_id=self.product.id, quantity=3)
        update_product(product=self.product, data={"price": Decimal("500.00")})

        cart = get_or_create_cart(user=self.user)
        self.assertEqual(cart.subtotal_amount, Decimal("240.00"))
        self.assertEqual(cart.item_count, 3)
