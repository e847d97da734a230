from django.urls import path
from .views import (
    ComboListCreateAPIView,
    ComboRetrieveUpdateDestroyAPIView,
    DishListCreateAPIView,
    DishRetrieveUpdateDestroyAPIView,
)

urlpatterns = [
    path("dishes/", DishListCreateAPIView.as_view(), name="dish-list"),
    path("dishes/<int:pk>/", DishRetrieveUpdateDestroyAPIView.as_view(), name="dish-detail"),
    path("combos/", ComboListCreateAPIView.as_view(), name="combo-list"),
    path("combos/<int:pk>/", ComboRetrieveUpdateDestroyAPIView.as_view(), name="combo-detail"),
]
