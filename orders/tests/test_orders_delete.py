from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from orders import services
from orders.models import Order, OrderLine, OrderSequenceCounter
from profiles.models import Profile


User = get_user_model()


def create_cook(username, phone):
    user = User.objects.create_user(username, f"{username}@example.com", "pass1234")
    Profile.objects.create(user=user, name=username.title(), phone=phone)
    return user, Token.objects.create(user=user)


def create_order(cook):
    return services.create_order(
        cook, {"client_name": "Ravi", "dishes": [{"name": "Idli", "quantity": 100, "unit_price": 6}]}
    )


class OrderDeleteTests(APITestCase):
    def setUp(self):
        self.cook, self.token = create_cook("cook", "9000000001")
        self.other, self.other_token = create_cook("other", "9000000002")
        self.order = create_order(self.cook)
        self.url = reverse("order-detail", kwargs={"pk": self.order.id})

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def test_owner_deletes_order_and_lines_204(self):
        self.auth(self.token)
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Order.objects.filter(pk=self.order.id).exists())
        self.assertFalse(OrderLine.objects.filter(order_id=self.order.id).exists())

    def test_deleted_number_is_not_reused(self):
        self.auth(self.token)
        self.client.delete(self.url)
        self.assertEqual(create_order(self.cook).order_number, "ORD-00002")
        self.assertEqual(OrderSequenceCounter.objects.get(cook=self.cook).seq, 2)

    def test_foreign_cook_404(self):
        self.auth(self.other_token)
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Order.objects.filter(pk=self.order.id).exists())

    def test_unauthenticated_401(self):
        res = self.client.delete(self.url)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
