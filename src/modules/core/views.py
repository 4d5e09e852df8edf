import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.db.models import Count
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.identity import caller_identity
from modules.core.models import EventStatus, OutboxEvent

logger = structlog.get_logger(__name__)


def _ping_database() -> None:
    with connections["default"].cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _ping_cache() -> None:
    cache.set("_health_check", "ok", 10)
    if cache.get("_health_check") != "ok":
        raise ConnectionError("Cache read failed")


PROBES: Dict[str, Callable[[], None]] = {
    "database": _ping_database,
    "cache": _ping_cache,
}


def _run_probe(name: str, probe: Callable[[], None]) -> Dict[str, Any]:
    started = time.monotonic()
    try:
        probe()
    except Exception:
        logger.exception("health.probe_failed", probe=name)
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - started) * 1000, 2),
    }


def _outbox_backlog() -> Dict[str, int]:
    """Undelivered domain events; informational, never fails the check."""
    counts = dict(
        OutboxEvent.objects.exclude(status=EventStatus.PUBLISHED)
        .order_by()
        .values_list("status")
        .annotate(total=Count("id"))
    )
    return {
        "pending": counts.get(EventStatus.PENDING, 0),
        "failed": counts.get(EventStatus.FAILED, 0),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health: database and cache probes plus the outbox backlog."""
    services = {name: _run_probe(name, probe) for name, probe in PROBES.items()}
    healthy = all(result["status"] == "up" for result in services.values())

    body: Dict[str, Any] = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": timezone.now().isoformat(),
        "services": services,
    }
    if services["database"]["status"] == "up":
        body["outbox"] = _outbox_backlog()

    logger.info("health.checked", status=body["status"])
    return JsonResponse(body, status=200 if healthy else 503)


class MeView(APIView):
    """Identity of the authenticated caller as the order module sees it.

    * No token  -> 401
    * Valid JWT -> 200 ``{_id, name, email, role}``
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(caller_identity(request.user))
