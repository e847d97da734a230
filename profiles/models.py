"""Profiles app models.

Defines the Profile model that turns a plain auth user into a cook (vendor)
account. The quotation header is built from these fields. String fields
default to empty strings to avoid nulls in API responses.
"""

from django.db import models
from django.conf import settings


class Profile(models.Model):
    """
    Cook profile for a single user.

    A profile is created at most once per user (OneToOne relationship). The
    email address is taken from the auth user.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=50, blank=True, default="")
    business_name = models.CharField(max_length=200, blank=True, default="")
    address = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.user_id}:{self.display_name}>"

    @property
    def display_name(self):
        """Business name if set, otherwise the cook's personal name."""
        return self.business_name or self.name

    @property
    def email(self):
        return self.user.email
