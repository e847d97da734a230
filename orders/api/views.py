"""Orders API views.

List and create orders on the same endpoint; every queryset is scoped to the
authenticated cook so another cook's order simply does not exist. Detail
update merges the payload into the stored order (pricing fields trigger a full
re-price), the status endpoint changes nothing but the status, the query
endpoint pages through orders by creation time and the quotation endpoint
returns the order as a PDF attachment.
"""

from django.http import HttpResponse
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from orders import services
from profiles.api.permissions import IsCook
from .pagination import CreatedAtCursorPagination
from .serializers import (
    OrderOutputSerializer,
    OrderStatusPatchSerializer,
    OrderWriteSerializer,
)


# ----------------------------- helpers (module-level) -----------------------------

def _validate_patch_only_status(data: dict):
    """Allow only 'status' in the payload; return a 400 response otherwise."""
    allowed = {"status"}
    extra = set(data.keys()) - allowed
    if extra:
        return Response(
            {"detail": f"Only 'status' may be updated. Invalid fields: {', '.join(sorted(extra))}."},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return None


# --------------------------------------- views ---------------------------------------

class OrderListCreateAPIView(generics.ListCreateAPIView):
    """GET: list the cook's orders, newest first.
    POST: create an order; snapshots, totals and order number are computed server-side.
    """

    permission_classes = [IsCook]

    def get_serializer_class(self):
        """Use output serializer for GET and input serializer for POST."""
        return OrderOutputSerializer if self.request.method == "GET" else OrderWriteSerializer

    def get_queryset(self):
        return services.orders_for_cook(self.request.user)

    def create(self, request, *args, **kwargs):
        """Validate and create a new order, returning the full order payload."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        return Response(OrderOutputSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderQueryAPIView(generics.ListAPIView):
    """GET /api/orders/query/?status=&order_type=&from_date=&to_date=&cursor=&limit=

    Returns `{data, next_cursor, has_more}`; pass `next_cursor` back as
    `cursor` to fetch the next (older) page.
    """

    permission_classes = [IsCook]
    serializer_class = OrderOutputSerializer
    pagination_class = CreatedAtCursorPagination

    def get_queryset(self):
        queryset = services.orders_for_cook(self.request.user)
        return services.filter_orders(queryset, self.request.query_params)


class OrderDetailAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET: full order. PATCH/PUT: merge update. DELETE: remove the order and its lines."""

    permission_classes = [IsCook]

    def get_serializer_class(self):
        if self.request.method in ("PATCH", "PUT"):
            return OrderWriteSerializer
        return OrderOutputSerializer

    def get_object(self):
        return services.get_order(self.request.user, self.kwargs["pk"])

    def update(self, request, *args, **kwargs):
        """Fields not supplied keep their stored values, for PUT as well."""
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        return Response(OrderOutputSerializer(order).data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        services.delete_order(request.user, kwargs["pk"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderStatusUpdateAPIView(APIView):
    """PATCH /api/orders/<id>/status/ -> full order.

    Only the status changes; stored totals and lines are left untouched.
    """

    permission_classes = [IsCook]

    def patch(self, request, pk: int):
        bad = _validate_patch_only_status(request.data)
        if bad is not None:
            return bad
        serializer = OrderStatusPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.update_order_status(request.user, pk, serializer.validated_data["status"])
        return Response(OrderOutputSerializer(order).data, status=status.HTTP_200_OK)


class OrderQuotationPDFAPIView(APIView):
    """GET /api/orders/<id>/quotation/ -> application/pdf attachment."""

    permission_classes = [IsCook]

    def get(self, request, pk: int):
        filename, pdf = services.quotation_for_order(request.user, pk)
        response = HttpResponse(pdf, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
