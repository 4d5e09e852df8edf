"""Django ORM implementation of the Notification repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.utils import timezone

from modules.notifications.models import Notification
from modules.notifications.repositories.interfaces import INotificationRepository


class NotificationDjangoRepository(INotificationRepository):
    def get_by_id(self, id: str) -> Optional[Notification]:
        try:
            return Notification.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Notification]:
        queryset = Notification.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("-created_at", "-id"))

    def save(self, entity: Notification) -> Notification:
        entity.save()
        return entity

    def delete(self, id: str) -> bool:
        notification = self.get_by_id(id)
        if not notification:
            return False
        notification.delete()
        return True

    def mark_read(self, id: str) -> bool:
        try:
            updated = Notification.objects.filter(id=id).update(
                is_read=True, updated_at=timezone.now()
            )
        except (ValueError, ValidationError):
            return False
        return updated > 0

    def mark_all_read(self) -> int:
        return Notification.objects.filter(is_read=False).update(
            is_read=True, updated_at=timezone.now()
        )
