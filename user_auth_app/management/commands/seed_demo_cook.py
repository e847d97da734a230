from decimal import Decimal

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.authtoken.models import Token

from catalog.models import Combo, ComboDish, Dish
from profiles.models import Profile

DEMO_COOK = {
    "username": "demo_cook",
    "password": "DemoKitchen#2026",
    "email": "demo.cook@example.com",
    "profile": {
        "name": "Meera Iyer",
        "phone": "9800000000",
        "business_name": "Meera's Home Kitchen",
        "address": "4 Temple Street, Chennai",
    },
}

DEMO_DISHES = [
    {"name": "Veg Biryani", "category": "meal", "type": "veg", "unit": "kg",
     "price_with_materials": Decimal("450"), "price_without_materials": Decimal("250")},
    {"name": "Gulab Jamun", "category": "sweet", "type": "veg", "unit": "piece",
     "price_with_materials": Decimal("15"), "price_without_materials": Decimal("8")},
    {"name": "Raita", "category": "meal", "type": "veg", "unit": "litre",
     "price_with_materials": Decimal("120"), "price_without_materials": Decimal("60")},
]


class Command(BaseCommand):
    help = "Create or update a demo cook with a small catalog for trying out the API."

    @transaction.atomic
    def handle(self, *args, **options):
        User = get_user_model()

        u, created = User.objects.get_or_create(
            username=DEMO_COOK["username"],
            defaults={"email": DEMO_COOK["email"]},
        )
        if created:
            self.stdout.write(self.style.SUCCESS(f"Created user '{u.username}'"))
        else:
            self.stdout.write(f"User '{u.username}' already exists")

        u.set_password(DEMO_COOK["password"])
        u.save(update_fields=["password"])
        Profile.objects.update_or_create(user=u, defaults=DEMO_COOK["profile"])

        dishes = {}
        for entry in DEMO_DISHES:
            fields = {k: v for k, v in entry.items() if k != "name"}
            dishes[entry["name"]], _ = Dish.objects.update_or_create(
                cook=u, name=entry["name"], defaults=fields
            )

        combo, _ = Combo.objects.update_or_create(
            cook=u,
            name="Festive Thali",
            defaults={
                "price_with_materials": Decimal("350"),
                "price_without_materials": Decimal("200"),
            },
        )
        combo.items.all().delete()
        ComboDish.objects.bulk_create([
            ComboDish(combo=combo, dish=dishes["Veg Biryani"], quantity=Decimal("0.25"), position=0),
            ComboDish(combo=combo, dish=dishes["Gulab Jamun"], quantity=Decimal("2"), position=1),
        ])

        token, _ = Token.objects.get_or_create(user=u)
        self.stdout.write(f"  -> {len(dishes)} dishes, 1 combo, token={token.key}")
        self.stdout.write(self.style.SUCCESS("Demo cook ready."))
