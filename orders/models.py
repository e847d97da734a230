"""Orders app models.

Defines the Order aggregate, its OrderLine rows and the per-cook
OrderSequenceCounter. Order lines snapshot the catalog data they were built
from (name, unit, unit price, combo composition) so that later catalog edits
or deletions never change a historical order.
"""

from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone

from catalog.models import Combo, Dish, Unit


class DiscountKind(models.TextChoices):
    NONE = "NONE", "none"
    FIXED_AMOUNT = "FIXED_AMOUNT", "fixed amount"
    PERCENT = "PERCENT", "percent"


class PricingMode(models.TextChoices):
    WITH_MATERIALS = "WITH_MATERIALS", "with materials"
    WITHOUT_MATERIALS = "WITHOUT_MATERIALS", "without materials"


class Order(models.Model):
    """A client order owned by exactly one cook."""

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "draft"
        QUOTED = "QUOTED", "quoted"
        CLIENT_APPROVED = "CLIENT_APPROVED", "client approved"
        CLIENT_REJECTED = "CLIENT_REJECTED", "client rejected"
        IN_PROGRESS = "IN_PROGRESS", "in progress"
        COMPLETED = "COMPLETED", "completed"
        CANCELLED = "CANCELLED", "cancelled"

    class OrderType(models.TextChoices):
        WITH_MATERIAL = "WITH_MATERIAL", "with material"
        WITHOUT_MATERIAL = "WITHOUT_MATERIAL", "without material"

    cook = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )
    order_number = models.CharField(max_length=32, blank=True, default="", db_index=True)

    client_name = models.CharField(max_length=200)
    client_phone = models.CharField(max_length=50, blank=True, default="")
    event_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    order_type = models.CharField(
        max_length=20, choices=OrderType.choices, default=OrderType.WITH_MATERIAL
    )

    discount_kind = models.CharField(
        max_length=20, choices=DiscountKind.choices, default=DiscountKind.NONE
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    additional_charges = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )

    # derived, recomputed on every pricing-relevant write
    subtotal = models.DecimalField(max_digits=30, decimal_places=4, default=0)
    total = models.DecimalField(max_digits=30, decimal_places=4, default=0)

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.DRAFT
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["cook", "order_number"],
                condition=~models.Q(order_number=""),
                name="unique_order_number_per_cook",
            ),
        ]

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return f"Order<{self.id} {self.order_number or 'DRAFT'} {self.status}>"

    @property
    def order_discount(self):
        return {"kind": self.discount_kind, "amount": self.discount_amount}

    @property
    def dish_lines(self):
        return [line for line in self.lines.all() if line.kind == OrderLine.Kind.DISH]

    @property
    def combo_lines(self):
        return [line for line in self.lines.all() if line.kind == OrderLine.Kind.COMBO]


class OrderLine(models.Model):
    """One priced entry of an order: a dish or a combo instance."""

    class Kind(models.TextChoices):
        DISH = "DISH", "dish"
        COMBO = "COMBO", "combo"

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="lines")
    kind = models.CharField(max_length=10, choices=Kind.choices)
    position = models.PositiveIntegerField(default=0)

    # source references survive as NULL once the catalog entry is deleted
    dish = models.ForeignKey(
        Dish, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    combo = models.ForeignKey(
        Combo, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )

    name_snapshot = models.CharField(max_length=200)
    unit = models.CharField(max_length=10, choices=Unit.choices, default=Unit.PIECE)
    quantity = models.DecimalField(max_digits=12, decimal_places=3, default=0)
    unit_price_snapshot = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    pricing_mode = models.CharField(
        max_length=20, choices=PricingMode.choices, default=PricingMode.WITH_MATERIALS
    )
    discount_kind = models.CharField(
        max_length=20, choices=DiscountKind.choices, default=DiscountKind.NONE
    )
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    included_dishes = models.JSONField(default=list, blank=True)

    line_subtotal = models.DecimalField(max_digits=30, decimal_places=4, default=0)
    line_final_amount = models.DecimalField(max_digits=30, decimal_places=4, default=0)

    class Meta:
        db_table = "order_lines"
        ordering = ["position", "id"]

    def __str__(self) -> str:
        return f"{self.kind} {self.quantity}x {self.name_snapshot}"

    @property
    def source_id(self):
        return self.combo_id if self.kind == self.Kind.COMBO else self.dish_id

    @property
    def line_discount(self):
        return {"kind": self.discount_kind, "amount": self.discount_amount}


class OrderSequenceCounter(models.Model):
    """Per-cook monotonic counter behind human-readable order numbers."""

    cook = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="order_counter",
    )
    seq = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "order_counters"

    def __str__(self) -> str:
        return f"OrderSequenceCounter<{self.cook_id}:{self.seq}>"
