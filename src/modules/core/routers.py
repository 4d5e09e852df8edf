"""Router accepting URLs with or without a trailing slash."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter


class OptionalSlashRouter(SimpleRouter):
    """``SimpleRouter`` whose routes match ``/api/orders`` and ``/api/orders/``."""

    def __init__(self) -> None:
        super().__init__()
        self.trailing_slash = "/?"
