from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from catalog.models import Combo, ComboDish, Dish
from profiles.models import Profile

User = get_user_model()


def create_cook(username, phone):
    user = User.objects.create_user(username, f"{username}@example.com", "pass1234")
    Profile.objects.create(user=user, name=username.title(), phone=phone)
    return user, Token.objects.create(user=user)


def add_dish(cook, name="Paneer Tikka", unit="kg", with_mat="400.00", without_mat="250.00"):
    return Dish.objects.create(
        cook=cook,
        name=name,
        category="meal",
        type="veg",
        unit=unit,
        price_with_materials=with_mat,
        price_without_materials=without_mat,
    )


class DishAPITests(APITestCase):
    def setUp(self):
        self.cook, self.token = create_cook("cook", "9000000001")
        self.other, self.other_token = create_cook("other", "9000000002")
        self.foreign = add_dish(self.other, name="Foreign Dish")
        self.url = reverse("dish-list")

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def test_create_dish_owned_by_caller_201(self):
        self.auth(self.token)
        payload = {
            "name": "Veg Pulao",
            "category": "meal",
            "type": "veg",
            "unit": "kg",
            "price_with_materials": "300.00",
            "price_without_materials": "180.00",
        }
        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Dish.objects.get(pk=res.data["id"]).cook_id, self.cook.id)

    def test_dish_unit_pkg_rejected_400(self):
        self.auth(self.token)
        payload = {
            "name": "Boxed",
            "category": "meal",
            "type": "veg",
            "unit": "pkg",
            "price_with_materials": "10.00",
            "price_without_materials": "5.00",
        }
        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("unit", res.data)

    def test_list_only_own_dishes(self):
        add_dish(self.cook)
        self.auth(self.token)
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([d["name"] for d in res.data], ["Paneer Tikka"])

    def test_foreign_dish_detail_404(self):
        self.auth(self.token)
        res = self.client.get(reverse("dish-detail", kwargs={"pk": self.foreign.id}))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_user_without_profile_403(self):
        plain = User.objects.create_user("plain", "plain@example.com", "pass1234")
        self.auth(Token.objects.create(user=plain))
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)


class ComboAPITests(APITestCase):
    def setUp(self):
        self.cook, self.token = create_cook("cook", "9000000001")
        self.other, _ = create_cook("other", "9000000002")
        self.rice = add_dish(self.cook, name="Jeera Rice")
        self.sweet = add_dish(self.cook, name="Gulab Jamun", unit="piece", with_mat="15.00", without_mat="8.00")
        self.foreign = add_dish(self.other, name="Foreign Dish")
        self.url = reverse("combo-list")
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {self.token.key}")

    def _payload(self, dishes):
        return {
            "name": "Mini Thali",
            "price_with_materials": "250.00",
            "price_without_materials": "150.00",
            "dishes": dishes,
        }

    def test_create_combo_with_composition_201(self):
        res = self.client.post(
            self.url,
            self._payload([
                {"dish_id": self.rice.id, "quantity": "0.25"},
                {"dish_id": self.sweet.id, "quantity": "2"},
            ]),
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        combo = Combo.objects.get(pk=res.data["id"])
        self.assertEqual(combo.cook_id, self.cook.id)
        items = list(combo.items.all())
        self.assertEqual([i.dish_id for i in items], [self.rice.id, self.sweet.id])
        self.assertEqual(items[0].quantity, Decimal("0.250"))
        self.assertEqual(res.data["dishes"][1]["name"], "Gulab Jamun")

    def test_empty_composition_400(self):
        res = self.client.post(self.url, self._payload([]), format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("dishes", res.data)

    def test_foreign_dish_in_composition_400(self):
        res = self.client.post(
            self.url, self._payload([{"dish_id": self.foreign.id, "quantity": "1"}]), format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("dishes", res.data)
        self.assertFalse(Combo.objects.exists())

    def test_quantity_below_minimum_400(self):
        res = self.client.post(
            self.url, self._payload([{"dish_id": self.rice.id, "quantity": "0.05"}]), format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_replaces_composition(self):
        combo = Combo.objects.create(
            cook=self.cook, name="Old", price_with_materials="1.00", price_without_materials="1.00"
        )
        ComboDish.objects.create(combo=combo, dish=self.rice, quantity="1")
        res = self.client.patch(
            reverse("combo-detail", kwargs={"pk": combo.id}),
            {"dishes": [{"dish_id": self.sweet.id, "quantity": "3"}]},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([i.dish_id for i in combo.items.all()], [self.sweet.id])
        combo.refresh_from_db()
        self.assertEqual(combo.name, "Old")
