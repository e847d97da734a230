"""Profiles API permissions.

Contains the permission class that gates every cook-only endpoint.
"""

from rest_framework.permissions import BasePermission


class IsCook(BasePermission):
    """
    Allows access only to authenticated users that own a cook profile.

    Orders, dishes and combos all belong to a cook, so every catalog and order
    endpoint requires a profile to be present.
    """

    message = "Only cook accounts may access this resource."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "profile", None) is not None
