"""Notification API views (admin inbox)."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.notifications.exceptions import NotificationNotFound
from modules.notifications.models import Notification
from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.serializers import NotificationSerializer
from modules.notifications.services import NotificationService


class NotificationViewSet(GenericViewSet):
    queryset = Notification.objects.all()
    serializer_class = NotificationSerializer
    permission_classes = [IsAdminUser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = NotificationService(NotificationDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/notifications: newest first, ``?unread=true`` to filter."""
        unread_only = request.query_params.get("unread", "").lower() in {"1", "true"}
        notifications = self._service.list_notifications(unread_only=unread_only)
        return Response(NotificationSerializer(notifications, many=True).data)

    @action(detail=True, methods=["put"], url_path="read")
    def mark_read(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/notifications/{pk}/read"""
        try:
            self._service.mark_read(pk)
        except NotificationNotFound as exc:
            return Response({"message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response({"success": True})

    @action(detail=False, methods=["put"], url_path="read/all")
    def mark_all_read(self, request: Request) -> Response:
        """PUT /api/notifications/read/all"""
        updated = self._service.mark_all_read()
        return Response({"success": True, "updated": updated})
