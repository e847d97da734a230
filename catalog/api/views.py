"""Catalog API views.

List/create and retrieve/update/delete endpoints for dishes and combos. Every
queryset is restricted to the authenticated cook, so foreign entities answer
with 404 exactly like missing ones.
"""

from rest_framework import generics

from profiles.api.permissions import IsCook
from catalog.models import Combo, Dish
from .serializers import ComboSerializer, DishSerializer


class DishListCreateAPIView(generics.ListCreateAPIView):
    """GET: list own dishes; POST: create a dish."""

    serializer_class = DishSerializer
    permission_classes = [IsCook]

    def get_queryset(self):
        return Dish.objects.filter(cook=self.request.user)


class DishRetrieveUpdateDestroyAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/PUT/DELETE a single own dish."""

    serializer_class = DishSerializer
    permission_classes = [IsCook]

    def get_queryset(self):
        return Dish.objects.filter(cook=self.request.user)


class ComboListCreateAPIView(generics.ListCreateAPIView):
    """GET: list own combos with composition; POST: create a combo."""

    serializer_class = ComboSerializer
    permission_classes = [IsCook]

    def get_queryset(self):
        return (
            Combo.objects.filter(cook=self.request.user)
            .prefetch_related("items__dish")
        )


class ComboRetrieveUpdateDestroyAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET/PATCH/PUT/DELETE a single own combo."""

    serializer_class = ComboSerializer
    permission_classes = [IsCook]

    def get_queryset(self):
        return (
            Combo.objects.filter(cook=self.request.user)
            .prefetch_related("items__dish")
        )
