from django.contrib import admin
from django.utils.html import format_html
from .models import Order, OrderLine, OrderSequenceCounter


class OrderLineInline(admin.TabularInline):
    """Priced lines are snapshots; shown read-only."""
    model = OrderLine
    extra = 0
    can_delete = False
    fields = (
        "kind",
        "position",
        "name_snapshot",
        "unit",
        "quantity",
        "unit_price_snapshot",
        "discount_kind",
        "discount_amount",
        "line_final_amount",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Order overview:
    - list: number, client, status badge, cook, total, created
    - filter: status, order type, created (date hierarchy)
    - readonly: number and derived amounts; status is editable
    """
    list_display = (
        "id",
        "order_number",
        "client_name",
        "status_badge",
        "cook_username",
        "total",
        "created_at",
        "updated_at",
    )
    list_select_related = ("cook",)
    list_filter = ("status", "order_type", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    search_fields = ("order_number", "client_name", "client_phone", "cook__username")

    readonly_fields = (
        "cook",
        "order_number",
        "discount_kind",
        "discount_amount",
        "additional_charges",
        "subtotal",
        "total",
        "created_at",
        "updated_at",
    )
    fields = (
        "status",
        "cook",
        "order_number",
        "client_name",
        "client_phone",
        "event_date",
        "order_type",
        "notes",
        "discount_kind",
        "discount_amount",
        "additional_charges",
        "subtotal",
        "total",
        "created_at",
        "updated_at",
    )
    inlines = [OrderLineInline]

    def status_badge(self, obj):
        color = {
            Order.Status.DRAFT: "#9ca3af",
            Order.Status.QUOTED: "#6366f1",
            Order.Status.CLIENT_APPROVED: "#14b8a6",
            Order.Status.CLIENT_REJECTED: "#f97316",
            Order.Status.IN_PROGRESS: "#0ea5e9",
            Order.Status.COMPLETED: "#22c55e",
            Order.Status.CANCELLED: "#ef4444",
        }.get(obj.status, "#9ca3af")
        return format_html(
            '<span style="display:inline-block;padding:2px 8px;border-radius:999px;'
            'font-size:12px;font-weight:600;color:#fff;background:{};">{}</span>',
            color,
            obj.get_status_display(),
        )
    status_badge.short_description = "status"
    status_badge.admin_order_field = "status"

    def cook_username(self, obj):
        return obj.cook.username if obj.cook_id else ""
    cook_username.short_description = "cook"


@admin.register(OrderSequenceCounter)
class OrderSequenceCounterAdmin(admin.ModelAdmin):
    list_display = ("cook", "seq")
    list_select_related = ("cook",)
    readonly_fields = ("cook", "seq")
