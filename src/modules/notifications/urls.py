"""Notification URL configuration."""

from __future__ import annotations

from modules.core.routers import OptionalSlashRouter
from modules.notifications.views import NotificationViewSet

router = OptionalSlashRouter()
router.register("notifications", NotificationViewSet, basename="notification")

urlpatterns = router.urls
