"""Profiles API views.

Provides the endpoint through which a cook reads and updates their own
profile. The profile is always resolved from the authenticated request and
never from the URL or payload.
"""

from rest_framework import generics

from .permissions import IsCook
from .serializers import ProfileSerializer


class MyProfileView(generics.RetrieveUpdateAPIView):
    """
    API endpoint for the authenticated cook's own profile.

    - GET `/api/users/me/` returns the profile.
    - PATCH/PUT `/api/users/me/` updates only the fields provided.
    """

    serializer_class = ProfileSerializer
    permission_classes = [IsCook]

    def get_object(self):
        """Return the caller's profile (IsCook guarantees it exists)."""
        return self.request.user.profile

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)
