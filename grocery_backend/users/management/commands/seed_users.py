# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_STAFF


@dataclass(frozen=True)
class SeedUser:
    label: str
    role: str
    email: str
    first_name: str = ""
    last_name: str = ""


SEED_USERS = [
    SeedUser("Admin", ROLE_ADMIN, "admin@example.com", "Agency", "Admin"),
    SeedUser("Staff", ROLE_STAFF, "staff@example.com", "Store", "Staff"),
    SeedUser("Customer", ROLE_CUSTOMER, "customer@example.com", "Demo", "Customer"),
]


class Command(BaseCommand):
    help = "Seed one admin, one staff and one customer account."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if not password or len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()

        created_count = 0
        updated_count = 0

        for seed in SEED_USERS:
            is_admin = seed.role == ROLE_ADMIN

            user, created = User.objects.get_or_create(
                email=seed.email,
                defaults={
                    "role": seed.role,
                    "first_name": seed.first_name,
                    "last_name": seed.last_name,
                    "is_staff": seed.role != ROLE_CUSTOMER,
                    "is_superuser": is_admin,
                    "is_active": True,
                },
            )

            if created or force_password:
                user.set_password(password)
                user.save(update_fields=["password"])

            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f"Created {seed.label}: {seed.email}"))
                continue

            if user.role != seed.role:
                user.role = seed.role
                user.save(update_fields=["role"])
                updated_count += 1
                self.stdout.write(f"Updated {seed.label}: {seed.email}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Done. created={created_count} updated={updated_count}"
            )
        )
