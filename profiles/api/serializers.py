"""Profiles API serializers.

Contains serializers for reading and partially updating the caller's own cook
profile. Email and password live on the auth user and are routed there.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from ..models import Profile

User = get_user_model()


# ------------------------------ helpers ------------------------------

def _apply_user_updates(user, data: dict, raw_password=None):
    fields = []
    if "email" in data:
        user.email = data["email"] or ""
        fields.append("email")
    if raw_password:
        user.set_password(raw_password)
        fields.append("password")
    if fields:
        user.save(update_fields=fields)


def _coalesce_fields(data: dict, keys: set):
    for k in keys:
        if data.get(k) is None:
            data[k] = ""


# ------------------------------ serializers ------------------------------

class ProfileSerializer(serializers.ModelSerializer):
    """
    Read and partial update of the caller's own profile.

    `email` maps to the auth user; `password` is write-only and re-hashed.
    """

    email = serializers.EmailField(source="user.email", required=False)
    username = serializers.CharField(source="user.username", read_only=True)
    password = serializers.CharField(write_only=True, required=False, min_length=6)

    class Meta:
        model = Profile
        fields = [
            "user",
            "username",
            "name",
            "phone",
            "email",
            "business_name",
            "address",
            "password",
            "created_at",
        ]
        read_only_fields = ["user", "username", "created_at"]

    def validate_email(self, value):
        user = self.instance.user if self.instance else None
        qs = User.objects.filter(email__iexact=value)
        if user is not None:
            qs = qs.exclude(pk=user.pk)
        if qs.exists():
            raise serializers.ValidationError("Email already in use.")
        return value

    def validate_password(self, value):
        validate_password(value, user=self.instance.user if self.instance else None)
        return value

    def update(self, instance: Profile, validated_data):
        """Route email/password to the user, everything else to the profile."""
        raw_password = validated_data.pop("password", None)
        _apply_user_updates(instance.user, validated_data.pop("user", {}), raw_password)
        for attr, val in validated_data.items():
            setattr(instance, attr, val if val is not None else "")
        instance.save()
        return instance

    _no_null = {"phone", "business_name", "address", "email"}

    def to_representation(self, instance: Profile):
        data = super().to_representation(instance)
        _coalesce_fields(data, self._no_null)
        return data
