from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

User = get_user_model()

# The default UserAdmin is registered by django.contrib.auth; replace it.
try:
    admin.site.unregister(User)
except admin.sites.NotRegistered:
    pass


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    """
    Users with their cook business name and admin flags.
    """
    list_display = (
        "id",
        "username",
        "email",
        "business_name_display",
        "is_staff",
        "is_active",
        "date_joined",
        "last_login",
    )
    list_select_related = ("profile",)
    ordering = ("-date_joined", "-id")
    search_fields = ("username", "email", "profile__business_name", "profile__phone")
    list_filter = ("is_staff", "is_superuser", "is_active")

    def business_name_display(self, obj):
        prof = getattr(obj, "profile", None)
        return getattr(prof, "business_name", "") or ""
    business_name_display.short_description = "business"
    business_name_display.admin_order_field = "profile__business_name"
