"""Catalog app models.

Defines the Dish and Combo models owned by a cook. Both carry a dual price
(with and without raw materials); the price applicable to an order line is
picked at order time by the line's pricing mode and then snapshotted.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Unit(models.TextChoices):
    KG = "kg", "kg"
    LITRE = "litre", "litre"
    PIECE = "piece", "piece"
    PKG = "pkg", "pkg"


class Dish(models.Model):
    """Represents a single dish sold by a cook."""

    class Category(models.TextChoices):
        SWEET = "sweet", "sweet"
        DESSERT = "dessert", "dessert"
        MEAL = "meal", "meal"
        SNACK = "snack", "snack"
        DRINK = "drink", "drink"

    class DietType(models.TextChoices):
        VEG = "veg", "veg"
        NON_VEG = "non-veg", "non-veg"
        EGG = "egg", "egg"

    cook = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="dishes",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=20, choices=Category.choices)
    type = models.CharField(max_length=20, choices=DietType.choices)
    unit = models.CharField(
        max_length=10,
        choices=[c for c in Unit.choices if c[0] != Unit.PKG],
    )
    price_with_materials = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    price_without_materials = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    min_order_qty = models.DecimalField(max_digits=10, decimal_places=3, default=0)
    image_url = models.URLField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "dishes"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.name} (#{self.pk})"


class Combo(models.Model):
    """A fixed bundle of dishes sold as one package."""

    cook = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="combos",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    price_with_materials = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    price_without_materials = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(0)]
    )
    min_order_qty = models.DecimalField(max_digits=10, decimal_places=3, default=1)
    image_url = models.URLField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "combos"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.name} (#{self.pk})"


class ComboDish(models.Model):
    """One dish inside a combo, with the quantity in the dish's own unit."""

    combo = models.ForeignKey(Combo, on_delete=models.CASCADE, related_name="items")
    dish = models.ForeignKey(Dish, on_delete=models.CASCADE, related_name="combo_items")
    quantity = models.DecimalField(
        max_digits=10, decimal_places=3, validators=[MinValueValidator(Decimal("0.1"))]
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "combo_dishes"
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.quantity}x dish #{self.dish_id} in combo #{self.combo_id}"
