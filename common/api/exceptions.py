"""Domain error taxonomy and the project-wide DRF exception handler.

Services raise these exceptions directly; DRF turns them into responses with
the matching status code. Database errors that escape a view are translated
here so every failure reaches the client as a JSON body.
"""

import logging

from django.db import DatabaseError, IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.views import exception_handler

log = logging.getLogger(__name__)


class NotFoundError(NotFound):
    """Entity is missing or owned by another cook (both look the same)."""

    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(APIException):
    """Raised when a write collides with existing data (e.g. order numbers)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting update."
    default_code = "conflict"


class RenderingError(APIException):
    """Document generation failed; no partial bytes are ever returned."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to generate PDF"
    default_code = "rendering_error"


class PersistenceError(APIException):
    """Storage unavailable or the transaction was aborted."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal Server Error"
    default_code = "persistence_error"


def _translate_db_error(exc):
    if isinstance(exc, IntegrityError):
        return ConflictError()
    if isinstance(exc, DatabaseError):
        return PersistenceError()
    return exc


def api_exception_handler(exc, context):
    """Map database errors to domain errors, then defer to DRF's handler."""
    exc = _translate_db_error(exc)
    response = exception_handler(exc, context)
    if response is not None and response.status_code >= 500:
        view = context.get("view")
        log.error(f"{type(exc).__name__} in {type(view).__name__}: {exc}")
    return response
