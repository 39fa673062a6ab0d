# users/tests/test_users.py

import io

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class UserManagerTests(TestCase):
    def test_defaults_to_customer(self):
        user = User.objects.create_user(email="Buyer@Example.COM", password="pass1234")
        self.assertEqual(user.role, User.ROLE_CUSTOMER)
        self.assertFalse(user.is_staff)
        self.assertEqual(user.email, "Buyer@example.com")
        self.assertTrue(user.check_password("pass1234"))

    def test_back_office_gets_admin_site_access(self):
        staff = User.objects.create_user(email="staff@example.com", password="pass1234", role=User.ROLE_STAFF)
        self.assertTrue(staff.is_staff)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="  ", password="pass1234")

    def test_superuser(self):
        user = User.objects.create_superuser(email="root@example.com", password="pass1234")
        self.assertEqual(user.role, User.ROLE_ADMIN)
        self.assertTrue(user.is_superuser)

    def test_display_name(self):
        user = User.objects.create_user(email="a@example.com", first_name="Asha", last_name="Rao")
        self.assertEqual(user.display_name, "Asha Rao")
        self.assertFalse(user.has_usable_password())


class MeViewTests(TestCase):
    """
    GUARANTEES:
    - Authentication required
    - Capabilities reflect the caller's role
    """

    def setUp(self):
        self.client = APIClient()

    def test_requires_authentication(self):
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 401)

    def test_customer_has_no_capabilities(self):
        user = User.objects.create_user(email="buyer@example.com", password="pass1234")
        self.client.force_authenticate(user)

        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["role"], "customer")
        self.assertEqual(res.data["capabilities"], [])

    def test_staff_capabilities(self):
        user = User.objects.create_user(email="staff@example.com", password="pass1234", role="staff")
        self.client.force_authenticate(user)

        caps = self.client.get("/api/auth/me/").data["capabilities"]
        self.assertIn("catalog.edit", caps)
        self.assertIn("payments.reconcile", caps)
        self.assertNotIn("catalog.delete", caps)

    def test_jwt_login(self):
        User.objects.create_user(email="buyer@example.com", password="pass1234")
        res = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "buyer@example.com", "password": "pass1234"},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['access']}")
        self.assertEqual(self.client.get("/api/auth/me/").status_code, 200)


class SeedUsersCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_users", password="secret123", stdout=io.StringIO())
        call_command("seed_users", password="secret123", stdout=io.StringIO())

        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(User.objects.get(email="staff@example.com").role, User.ROLE_STAFF)
