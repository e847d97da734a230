from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


DISCOUNT_CHOICES = [
    ("NONE", "none"),
    ("FIXED_AMOUNT", "fixed amount"),
    ("PERCENT", "percent"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_number", models.CharField(blank=True, db_index=True, default="", max_length=32)),
                ("client_name", models.CharField(max_length=200)),
                ("client_phone", models.CharField(blank=True, default="", max_length=50)),
                ("event_date", models.DateField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "order_type",
                    models.CharField(
                        choices=[("WITH_MATERIAL", "with material"), ("WITHOUT_MATERIAL", "without material")],
                        default="WITH_MATERIAL",
                        max_length=20,
                    ),
                ),
                ("discount_kind", models.CharField(choices=DISCOUNT_CHOICES, default="NONE", max_length=20)),
                (
                    "discount_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "additional_charges",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("subtotal", models.DecimalField(decimal_places=4, default=0, max_digits=30)),
                ("total", models.DecimalField(decimal_places=4, default=0, max_digits=30)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "draft"),
                            ("QUOTED", "quoted"),
                            ("CLIENT_APPROVED", "client approved"),
                            ("CLIENT_REJECTED", "client rejected"),
                            ("IN_PROGRESS", "in progress"),
                            ("COMPLETED", "completed"),
                            ("CANCELLED", "cancelled"),
                        ],
                        default="DRAFT",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "cook",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="OrderLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=[("DISH", "dish"), ("COMBO", "combo")], max_length=10)),
                ("position", models.PositiveIntegerField(default=0)),
                ("name_snapshot", models.CharField(max_length=200)),
                (
                    "unit",
                    models.CharField(
                        choices=[("kg", "kg"), ("litre", "litre"), ("piece", "piece"), ("pkg", "pkg")],
                        default="piece",
                        max_length=10,
                    ),
                ),
                ("quantity", models.DecimalField(decimal_places=3, default=0, max_digits=12)),
                ("unit_price_snapshot", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                (
                    "pricing_mode",
                    models.CharField(
                        choices=[("WITH_MATERIALS", "with materials"), ("WITHOUT_MATERIALS", "without materials")],
                        default="WITH_MATERIALS",
                        max_length=20,
                    ),
                ),
                ("discount_kind", models.CharField(choices=DISCOUNT_CHOICES, default="NONE", max_length=20)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("included_dishes", models.JSONField(blank=True, default=list)),
                ("line_subtotal", models.DecimalField(decimal_places=4, default=0, max_digits=30)),
                ("line_final_amount", models.DecimalField(decimal_places=4, default=0, max_digits=30)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="orders.order",
                    ),
                ),
                (
                    "dish",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="catalog.dish",
                    ),
                ),
                (
                    "combo",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="catalog.combo",
                    ),
                ),
            ],
            options={
                "db_table": "order_lines",
                "ordering": ["position", "id"],
            },
        ),
        migrations.CreateModel(
            name="OrderSequenceCounter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("seq", models.PositiveIntegerField(default=0)),
                (
                    "cook",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="order_counter",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "order_counters",
            },
        ),
        migrations.AddConstraint(
            model_name="order",
            constraint=models.UniqueConstraint(
                condition=models.Q(("order_number", ""), _negated=True),
                fields=("cook", "order_number"),
                name="unique_order_number_per_cook",
            ),
        ),
    ]
