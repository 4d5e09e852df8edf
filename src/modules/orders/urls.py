"""Order URL configuration."""

from __future__ import annotations

from modules.core.routers import OptionalSlashRouter
from modules.orders.views import OrderViewSet

router = OptionalSlashRouter()
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
