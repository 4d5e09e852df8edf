"""Request correlation for structured logs.

Every request gets a correlation id: the caller's ``X-Request-ID`` when it
is a sane token, otherwise a fresh UUID4.  The id is bound into structlog
contextvars for the lifetime of the request, so order creation, ledger
debits and category cascades all log it, and it is echoed back in the
``X-Request-ID`` response header.
"""

from __future__ import annotations

import re
import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_correlation_id(raw: str | None) -> str:
    """Accept a client id only if it is short and log-safe."""
    if raw and _REQUEST_ID_PATTERN.match(raw):
        return raw
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = resolve_correlation_id(request.headers.get(REQUEST_ID_HEADER))
        started = time.monotonic()

        with structlog.contextvars.bound_contextvars(correlation_id=cid):
            response = self.get_response(request)
            logger.info(
                "http.request",
                method=request.method,
                path=request.path,
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - started) * 1000, 2),
            )

        response[REQUEST_ID_HEADER] = cid
        return response
