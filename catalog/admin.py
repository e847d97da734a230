from django.contrib import admin
from .models import Combo, ComboDish, Dish


@admin.register(Dish)
class DishAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "cook", "unit", "price_with_materials", "price_without_materials", "created_at")
    list_select_related = ("cook",)
    list_filter = ("category", "type", "unit")
    search_fields = ("name", "cook__username")
    ordering = ("-created_at", "-id")


class ComboDishInline(admin.TabularInline):
    model = ComboDish
    extra = 0
    autocomplete_fields = ("dish",)


@admin.register(Combo)
class ComboAdmin(admin.ModelAdmin):
    """
    Combos with their composition inline. Prices are per package.
    """
    list_display = ("id", "name", "cook", "price_with_materials", "price_without_materials", "created_at")
    list_select_related = ("cook",)
    search_fields = ("name", "cook__username")
    ordering = ("-created_at", "-id")
    inlines = [ComboDishInline]
