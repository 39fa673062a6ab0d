# products/admin.py

from django.contrib import admin, messages

from products.models import Category, Product
from products.services.catalog import create_product, update_product
from products.services.near_expiry import sweep_near_expiry


# =====================================================
# CATEGORY
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "created_at")
    search_fields = ("name",)
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("name",)


# =====================================================
# PRODUCT
# =====================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """
    near_expiry / discount_percent are read-only here too: saves are routed
    through the catalog service so the classifier decides them.
    """

    list_display = (
        "name",
        "category",
        "price",
        "effective_price",
        "stock",
        "expiry_date",
        "near_expiry",
        "discount_percent",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active", "near_expiry", "category")
    search_fields = ("name", "description")
    ordering = ("-created_at",)
    readonly_fields = ("near_expiry", "discount_percent", "created_at", "updated_at")
    actions = ["run_near_expiry_sweep"]

    def save_model(self, request, obj, form, change):
        if change:
            data = {f: form.cleaned_data[f] for f in form.changed_data if f in form.cleaned_data}
            saved = update_product(product=obj, data=data)
        else:
            saved = create_product(data=dict(form.cleaned_data))

        # Admin reads obj.pk afterwards for the log entry / redirect
        obj.pk = saved.pk
        obj.near_expiry = saved.near_expiry
        obj.discount_percent = saved.discount_percent

    @admin.action(description="Run near-expiry sweep now")
    def run_near_expiry_sweep(self, request, queryset):
        updated = sweep_near_expiry()
        self.message_user(
            request,
            f"Near-expiry sweep flagged {updated} product(s).",
            level=messages.SUCCESS,
        )
