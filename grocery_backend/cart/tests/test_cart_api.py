# cart/tests/test_cart_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from cart.models import CartItem
from products.models import Product

User = get_user_model()


class CartApiTests(TestCase):
    """
    Cart endpoint tests.

    GUARANTEES:
    - Authentication required
    - Error bodies are normalized
    - Update with quantity 0 removes the line
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.client.force_authenticate(self.user)

        self.product = Product.objects.create(
            name="Apples 1kg",
            price=Decimal("100.00"),
            stock=10,
            near_expiry=True,
            discount_percent=Decimal("20.00"),
        )

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get("/api/cart/").status_code, 401)

    def test_get_empty_cart(self):
        res = self.client.get("/api/cart/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["items"], [])
        self.assertEqual(res.data["subtotal"], "0.00")

    def test_add_and_merge(self):
        res = self.client.post("/api/cart/add/", {"productId": str(self.product.id), "quantity": 2}, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["priceAtAdd"], "80.00")

        res = self.client.post("/api/cart/add/", {"productId": str(self.product.id), "quantity": 2}, format="json")
        self.assertEqual(res.data["quantity"], 4)

        cart = self.client.get("/api/cart/").data
        self.assertEqual(len(cart["items"]), 1)
        self.assertEqual(cart["itemCount"], 4)
        self.assertEqual(cart["subtotal"], "320.00")

    def test_add_unknown_product(self):
        res = self.client.post(
            "/api/cart/add/",
            {"productId": "00000000-0000-0000-0000-000000000000", "quantity": 1},
            format="json",
        )
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "PRODUCT_NOT_FOUND")

    def test_add_invalid_quantity(self):
        res = self.client.post("/api/cart/add/", {"productId": str(self.product.id), "quantity": 0}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_QUANTITY")

    def test_update_and_remove_by_zero(self):
        self.client.post("/api/cart/add/", {"productId": str(self.product.id), "quantity": 1}, format="json")

        res = self.client.put("/api/cart/update/", {"productId": str(self.product.id), "quantity": 6}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["quantity"], 6)

        res = self.client.put("/api/cart/update/", {"productId": str(self.product.id), "quantity": 0}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["removed"])
        self.assertFalse(CartItem.objects.exists())

    def test_update_item_not_in_cart(self):
        res = self.client.put("/api/cart/update/", {"productId": str(self.product.id), "quantity": 2}, format="json")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "CART_ITEM_NOT_FOUND")

    def test_remove_and_clear(self):
        self.client.post("/api/cart/add/", {"productId": str(self.product.id), "quantity": 1}, format="json")

        res = self.client.delete(f"/api/cart/remove/{self.product.id}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["items"], [])

        self.client.post("/api/cart/add/", {"productId": str(self.product.id), "quantity": 1}, format="json")
        res = self.client.delete("/api/cart/clear/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["itemCount"], 0)
