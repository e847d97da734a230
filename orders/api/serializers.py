"""Orders API serializers.

Input serializers validate order payloads (client data, dish and combo lines,
discounts, charges) and hand them to the order services, which capture
snapshots and compute totals. Output serializers represent the persisted
aggregate with dish and combo lines listed separately.
"""

from decimal import Decimal

from rest_framework import serializers

from catalog.models import Unit
from orders import services
from orders.models import DiscountKind, Order, OrderLine, PricingMode


class DiscountSerializer(serializers.Serializer):
    """`{kind, amount}`; kind NONE means no discount whatever the amount.

    A supplied descriptor replaces the stored one as a whole: sending only
    `amount` leaves `kind` at NONE.
    """

    kind = serializers.ChoiceField(choices=DiscountKind.choices, default=DiscountKind.NONE)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), default=Decimal("0")
    )


class IncludedDishSerializer(serializers.Serializer):
    """One dish of a combo's composition snapshot."""

    dish_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=200)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=Decimal("0"))


class OrderLineInputSerializer(serializers.Serializer):
    """A dish or combo line as sent by the client.

    Either `source_id` (catalog reference) or `name` must be present. Quantity
    and unit price may be omitted while drafting and then count as 0.
    """

    source_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    unit = serializers.ChoiceField(choices=Unit.choices, required=False)
    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=3, min_value=Decimal("0"), required=False, allow_null=True
    )
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, allow_null=True
    )
    pricing_mode = serializers.ChoiceField(choices=PricingMode.choices, required=False)
    discount = DiscountSerializer(required=False)
    included_dishes = IncludedDishSerializer(many=True, required=False)

    def validate(self, attrs):
        if attrs.get("source_id") is None and not attrs.get("name"):
            raise serializers.ValidationError("Each line needs a source_id or a name.")
        return attrs


class OrderWriteSerializer(serializers.Serializer):
    """Create (POST) and merge-update (PATCH/PUT) serializer for orders.

    The cook is taken from request.user (context) and never from payload.
    `order_number`, `subtotal` and `total` are never accepted as input.
    Line groups and `order_discount` are replaced whole, never merged field
    by field.
    """

    client_name = serializers.CharField(max_length=200)
    client_phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    event_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    order_type = serializers.ChoiceField(choices=Order.OrderType.choices, required=False)
    status = serializers.ChoiceField(choices=Order.Status.choices, required=False)
    dishes = OrderLineInputSerializer(many=True, required=False)
    combos = OrderLineInputSerializer(many=True, required=False)
    order_discount = DiscountSerializer(required=False)
    additional_charges = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False
    )

    def create(self, validated_data):
        """Create the order (snapshots, totals and order number) via the services."""
        return services.create_order(self.context["request"].user, validated_data)

    def update(self, instance, validated_data):
        """Merge the supplied fields into the stored order and re-price if needed."""
        return services.update_order(self.context["request"].user, instance.pk, validated_data)


class OrderLineOutputSerializer(serializers.ModelSerializer):
    """Read serializer for one priced line."""

    source_id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source="name_snapshot", read_only=True)
    unit_price = serializers.DecimalField(
        source="unit_price_snapshot", max_digits=12, decimal_places=2, read_only=True
    )
    discount = serializers.SerializerMethodField()

    class Meta:
        model = OrderLine
        fields = [
            "id",
            "source_id",
            "name",
            "unit",
            "quantity",
            "unit_price",
            "pricing_mode",
            "discount",
            "included_dishes",
            "line_subtotal",
            "line_final_amount",
        ]

    def get_discount(self, obj):
        return {"kind": obj.discount_kind, "amount": str(obj.discount_amount)}

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if instance.kind != OrderLine.Kind.COMBO:
            data.pop("included_dishes", None)
        return data


class OrderOutputSerializer(serializers.ModelSerializer):
    """Read serializer for returning a complete order representation."""

    dishes = serializers.SerializerMethodField()
    combos = serializers.SerializerMethodField()
    order_discount = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "cook",
            "order_number",
            "client_name",
            "client_phone",
            "event_date",
            "notes",
            "order_type",
            "dishes",
            "combos",
            "order_discount",
            "additional_charges",
            "subtotal",
            "total",
            "status",
            "created_at",
            "updated_at",
        ]

    def get_dishes(self, obj):
        return OrderLineOutputSerializer(obj.dish_lines, many=True).data

    def get_combos(self, obj):
        return OrderLineOutputSerializer(obj.combo_lines, many=True).data

    def get_order_discount(self, obj):
        return {"kind": obj.discount_kind, "amount": str(obj.discount_amount)}


class OrderStatusPatchSerializer(serializers.ModelSerializer):
    """Patch serializer used to update only the order status."""

    class Meta:
        model = Order
        fields = ["status"]
        extra_kwargs = {"status": {"required": True}}
