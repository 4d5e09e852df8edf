"""Notification exceptions."""

from __future__ import annotations


class NotificationNotFound(Exception):
    """The requested notification does not exist."""
