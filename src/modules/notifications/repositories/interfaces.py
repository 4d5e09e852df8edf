"""Notification repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.notifications.models import Notification


class INotificationRepository(IRepository["Notification"]):
    @abstractmethod
    def mark_read(self, id: str) -> bool:
        """Flag one notification as read; ``False`` if it does not exist."""

    @abstractmethod
    def mark_all_read(self) -> int:
        """Flag every unread notification as read; returns the row count."""
