# products/management/commands/seed_catalog.py

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from products.models import Category, Product
from products.services.catalog import create_product, update_product


class Command(BaseCommand):
    help = "Seed grocery categories and products with a spread of expiry dates"

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding catalog..."))
        today = timezone.localdate()

        # -------------------------------
        # CATEGORIES
        # -------------------------------
        categories = ["Dairy", "Bakery", "Produce", "Pantry", "Beverages"]

        category_objs = {}
        for name in categories:
            obj, _ = Category.objects.get_or_create(name=name)
            category_objs[name] = obj

        # -------------------------------
        # PRODUCTS (name, category, price, stock, days to expiry)
        # -------------------------------
        products_data = [
            ("Toned Milk 1L", "Dairy", "64.00", 40, 2),
            ("Paneer 200g", "Dairy", "90.00", 25, 5),
            ("Greek Yogurt 400g", "Dairy", "120.00", 18, 12),
            ("Whole Wheat Bread", "Bakery", "45.00", 30, 3),
            ("Butter Croissant", "Bakery", "55.00", 12, 1),
            ("Bananas 1 dozen", "Produce", "60.00", 50, 6),
            ("Spinach 250g", "Produce", "30.00", 8, 2),
            ("Basmati Rice 5kg", "Pantry", "650.00", 20, 365),
            ("Toor Dal 1kg", "Pantry", "160.00", 35, 240),
            ("Orange Juice 1L", "Beverages", "110.00", 6, 9),
            ("Green Tea 100 bags", "Beverages", "299.00", 15, None),
        ]

        created = 0
        for name, cat, price, stock, days in products_data:
            data = {
                "name": name,
                "category": category_objs[cat],
                "price": Decimal(price),
                "stock": stock,
                "expiry_date": (today + timedelta(days=days)) if days is not None else None,
            }

            existing = Product.objects.filter(name=name).first()
            if existing:
                update_product(product=existing, data=data)
            else:
                create_product(data=data)
                created += 1

        near = Product.objects.filter(is_active=True, near_expiry=True).count()
        self.stdout.write(
            self.style.SUCCESS(f"✅ Catalog seeded ({created} new products, {near} near expiry).")
        )
