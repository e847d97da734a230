"""Cursor pagination for the order query endpoint.

The cursor is the `created_at` timestamp of the last order on the previous
page; the next page holds strictly older orders. One extra row is fetched to
tell whether more pages remain.
"""

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework.exceptions import ValidationError
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


class CreatedAtCursorPagination(BasePagination):
    """Newest-first pages bounded by an exclusive `created_at` cursor."""

    cursor_query_param = "cursor"
    limit_query_param = "limit"

    def paginate_queryset(self, queryset, request, view=None):
        self.limit = self._parse_limit(request.query_params.get(self.limit_query_param))
        cursor = self._parse_cursor(request.query_params.get(self.cursor_query_param))
        if cursor is not None:
            queryset = queryset.filter(created_at__lt=cursor)

        rows = list(queryset.order_by("-created_at", "-id")[: self.limit + 1])
        self.has_more = len(rows) > self.limit
        rows = rows[: self.limit]
        self.next_cursor = rows[-1].created_at if rows else None
        return rows

    def get_paginated_response(self, data):
        return Response(
            {
                "data": data,
                "next_cursor": self.next_cursor.isoformat() if self.next_cursor else None,
                "has_more": self.has_more,
            }
        )

    # --- helpers ---
    def _parse_limit(self, raw):
        if raw in (None, ""):
            return settings.ORDER_QUERY_DEFAULT_LIMIT
        if not raw.isdigit() or int(raw) < 1:
            raise ValidationError({"limit": "Must be a positive integer."})
        return min(int(raw), settings.ORDER_QUERY_MAX_LIMIT)

    def _parse_cursor(self, raw):
        if not raw:
            return None
        # an unencoded "+" in the offset arrives as a space
        try:
            value = parse_datetime(raw.replace(" ", "+"))
        except ValueError:
            value = None
        if value is None:
            raise ValidationError({"cursor": "Must be an ISO 8601 timestamp."})
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        return value
