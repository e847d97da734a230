from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient
from rest_framework.authtoken.models import Token

from profiles.models import Profile

User = get_user_model()


class MyProfileTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="cook", email="cook@mail.de", password="Pass123!"
        )
        self.profile = Profile.objects.create(
            user=self.user, name="Asha Rao", phone="9876543210", business_name="Asha's Kitchen"
        )
        self.client_cook = APIClient()
        self.client_cook.credentials(HTTP_AUTHORIZATION="Token " + Token.objects.create(user=self.user).key)

        # authenticated user without cook profile
        self.plain = User.objects.create_user(username="plain", email="plain@mail.de", password="Pass123!")
        self.client_plain = APIClient()
        self.client_plain.credentials(HTTP_AUTHORIZATION="Token " + Token.objects.create(user=self.plain).key)

        self.client_anon = APIClient()
        self.url = reverse("my-profile")

    def test_get_own_profile(self):
        resp = self.client_cook.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["username"], "cook")
        self.assertEqual(resp.data["name"], "Asha Rao")
        self.assertEqual(resp.data["email"], "cook@mail.de")
        self.assertEqual(resp.data["address"], "")
        self.assertNotIn("password", resp.data)

    def test_patch_updates_profile_and_user_email(self):
        payload = {"address": "12 MG Road, Pune", "email": "new@mail.de"}
        resp = self.client_cook.patch(self.url, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["address"], "12 MG Road, Pune")
        self.assertEqual(resp.data["email"], "new@mail.de")

        self.user.refresh_from_db()
        self.profile.refresh_from_db()
        self.assertEqual(self.user.email, "new@mail.de")
        self.assertEqual(self.profile.address, "12 MG Road, Pune")
        self.assertEqual(self.profile.name, "Asha Rao")

    def test_patch_password_rehashes(self):
        resp = self.client_cook.patch(self.url, {"password": "An0therStrong!"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("An0therStrong!"))

    def test_patch_email_taken_400(self):
        resp = self.client_cook.patch(self.url, {"email": "plain@mail.de"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", resp.data)

    def test_user_without_profile_403(self):
        resp = self.client_plain.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated_401(self):
        resp = self.client_anon.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
