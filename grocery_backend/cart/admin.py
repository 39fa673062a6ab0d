from django.contrib import admin

from .models import Cart, CartItem

# =====================================================
# CART ITEM INLINE (READ-ONLY)
# =====================================================


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "quantity",
        "price_at_add",
        "line_total",
        "created_at",
    )

    def has_add_permission(self, request, obj=None):
        return False


# =====================================================
# CART ADMIN
# =====================================================


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "item_count",
        "subtotal_amount",
        "updated_at",
    )
    search_fields = ("user__email",)
    readonly_fields = (
        "id",
        "user",
        "created_at",
        "updated_at",
        "subtotal_amount",
        "item_count",
    )
    inlines = [CartItemInline]
