from django.contrib import admin
from .models import Profile

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Cook profiles with their own ID, the owning user ID and business name.
    """
    list_display = ("id", "user_id_display", "user", "name", "business_name", "phone", "created_at")
    list_select_related = ("user",)
    search_fields = ("user__username", "user__email", "name", "business_name", "phone")
    list_filter = ("created_at",)
    ordering = ("-created_at", "-id")
    readonly_fields = ("created_at",)

    def user_id_display(self, obj):
        return obj.user_id
    user_id_display.short_description = "user id"
    user_id_display.admin_order_field = "user__id"
