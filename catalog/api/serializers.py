"""Catalog API serializers.

Provide serializers for the cook's dishes and combos. Combo composition is
validated against the cook's own dishes: a combo needs at least one dish and
every referenced dish must exist and belong to the requesting cook.
"""

from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from ..models import Combo, ComboDish, Dish


# --------------------------- helpers (pure functions) ---------------------------

def _validate_non_negative(value, field):
    if value is not None and value < 0:
        raise serializers.ValidationError({field: "Must be >= 0."})


def _request_user(serializer):
    request = serializer.context.get("request")
    return request.user if request else None


def _replace_combo_items(combo, dishes_data):
    ComboDish.objects.filter(combo=combo).delete()
    ComboDish.objects.bulk_create(
        [
            ComboDish(combo=combo, dish=d["dish"], quantity=d["quantity"], position=i)
            for i, d in enumerate(dishes_data)
        ]
    )


# --------------------------------- serializers ---------------------------------

class DishSerializer(serializers.ModelSerializer):
    """Create/read/update serializer for a dish; the cook comes from the request."""

    class Meta:
        model = Dish
        fields = [
            "id",
            "name",
            "description",
            "category",
            "type",
            "unit",
            "price_with_materials",
            "price_without_materials",
            "min_order_qty",
            "image_url",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate(self, attrs):
        _validate_non_negative(attrs.get("price_with_materials"), "price_with_materials")
        _validate_non_negative(attrs.get("price_without_materials"), "price_without_materials")
        _validate_non_negative(attrs.get("min_order_qty"), "min_order_qty")
        return attrs

    def create(self, validated_data):
        return Dish.objects.create(cook=_request_user(self), **validated_data)


class ComboDishSerializer(serializers.Serializer):
    """One entry of a combo's composition."""

    dish_id = serializers.IntegerField()
    quantity = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=Decimal("0.1")
    )

    def to_representation(self, instance):
        return {
            "dish_id": instance.dish_id,
            "name": instance.dish.name,
            "unit": instance.dish.unit,
            "quantity": str(instance.quantity),
        }


class ComboSerializer(serializers.ModelSerializer):
    """Serializer for combos including their nested dish composition.

    Notes:
    - The owner is taken from request.user (context) and never from payload.
    - `dishes` must be a non-empty list of {dish_id, quantity}; every dish must
      belong to the same cook.
    """

    dishes = ComboDishSerializer(many=True, source="items")

    class Meta:
        model = Combo
        fields = [
            "id",
            "name",
            "description",
            "dishes",
            "price_with_materials",
            "price_without_materials",
            "min_order_qty",
            "image_url",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate_dishes(self, value):
        """Ensure the composition is non-empty and only references own dishes."""
        if not value:
            raise serializers.ValidationError("Combo must contain at least one dish.")
        dish_ids = [d["dish_id"] for d in value]
        found = Dish.objects.in_bulk(set(dish_ids))
        user = _request_user(self)
        if any(i not in found or found[i].cook_id != user.id for i in dish_ids):
            raise serializers.ValidationError("One or more dishes are invalid.")
        return [{"dish": found[d["dish_id"]], "quantity": d["quantity"]} for d in value]

    def validate(self, attrs):
        _validate_non_negative(attrs.get("price_with_materials"), "price_with_materials")
        _validate_non_negative(attrs.get("price_without_materials"), "price_without_materials")
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        """Create the combo and its composition rows in a single transaction."""
        dishes_data = validated_data.pop("items")
        combo = Combo.objects.create(cook=_request_user(self), **validated_data)
        _replace_combo_items(combo, dishes_data)
        return combo

    @transaction.atomic
    def update(self, instance, validated_data):
        """Update scalar fields; a supplied composition replaces the old one."""
        dishes_data = validated_data.pop("items", None)
        for attr, val in validated_data.items():
            setattr(instance, attr, val)
        instance.save()
        if dishes_data is not None:
            _replace_combo_items(instance, dishes_data)
        return instance
