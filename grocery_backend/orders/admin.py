from django.contrib import admin

from orders.models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are snapshots: items and money are never edited here.
    Status changes go through the API so transitions are validated.
    """

    list_display = (
        "id",
        "user",
        "total_amount",
        "payment_method",
        "payment_status",
        "status",
        "created_at",
    )
    list_filter = ("status", "payment_status", "payment_method", "created_at")
    search_fields = ("id", "user__email", "gateway_order_id")
    ordering = ("-created_at",)
    readonly_fields = [f.name for f in Order._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
