from django.urls import path
from .views import (
    OrderDetailAPIView,
    OrderListCreateAPIView,
    OrderQueryAPIView,
    OrderQuotationPDFAPIView,
    OrderStatusUpdateAPIView,
)

urlpatterns = [
    path("orders/", OrderListCreateAPIView.as_view(), name="order-list"),
    path("orders/query/", OrderQueryAPIView.as_view(), name="order-query"),
    path("orders/<int:pk>/", OrderDetailAPIView.as_view(), name="order-detail"),
    path("orders/<int:pk>/status/", OrderStatusUpdateAPIView.as_view(), name="order-status"),
    path("orders/<int:pk>/quotation/", OrderQuotationPDFAPIView.as_view(), name="order-quotation"),
]
