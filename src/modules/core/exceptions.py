"""Project-wide DRF exception handler.

Domain exceptions are translated by the views themselves.  This handler
only reshapes what reaches DRF: framework errors (validation, auth,
permission, 404, throttling) become ``{"message": ..., "errors": ...}``
and anything unexpected is logged server-side and answered with a generic
500 that never leaks internals.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Server error"


def api_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "api.unhandled_exception",
            view=view.__class__.__name__ if view else None,
            error_type=exc.__class__.__name__,
        )
        return Response(
            {"message": GENERIC_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {
            "message": _first_message(response.data) or "Invalid request.",
            "errors": response.data,
        }
    elif isinstance(response.data, dict) and "detail" in response.data:
        response.data = {"message": str(response.data["detail"])}

    return response


def _first_message(data: Any) -> Optional[str]:
    """Dig the first human-readable message out of nested DRF error data."""
    if isinstance(data, dict):
        for key, value in data.items():
            message = _first_message(value)
            if message:
                if key in ("non_field_errors", "detail"):
                    return message
                return f"{key}: {message}"
        return None
    if isinstance(data, list):
        for item in data:
            message = _first_message(item)
            if message:
                return message
        return None
    return str(data) if data else None


def pydantic_message(exc: PydanticValidationError) -> str:
    """First DTO validation message, without pydantic's ``Value error`` prefix."""
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    return str(errors[0].get("msg", "Invalid request.")).removeprefix("Value error, ")
