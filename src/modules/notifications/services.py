"""Notification service: admin inbox writes and reads."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog

from modules.notifications.exceptions import NotificationNotFound
from modules.notifications.models import Notification, NotificationKind

if TYPE_CHECKING:
    from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


class NotificationService:
    def __init__(self, repository: INotificationRepository) -> None:
        self._repo = repository

    def notify(
        self, kind: NotificationKind, message: str, order_id: Optional[UUID] = None
    ) -> Notification:
        notification = self._repo.save(
            Notification(kind=kind, message=message, order_id=order_id)
        )
        logger.info(
            "notification.created",
            notification_id=str(notification.id),
            kind=kind.value,
            order_id=str(order_id or ""),
        )
        return notification

    def list_notifications(self, unread_only: bool = False) -> List[Notification]:
        return self._repo.list({"is_read": False} if unread_only else None)

    def mark_read(self, id: str) -> None:
        """Raises ``NotificationNotFound`` for unknown ids."""
        if not self._repo.mark_read(id):
            raise NotificationNotFound("Notification not found")

    def mark_all_read(self) -> int:
        updated = self._repo.mark_all_read()
        logger.info("notification.all_marked_read", updated=updated)
        return updated
