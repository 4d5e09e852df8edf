"""Admin inbox notifications raised by order events."""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class NotificationKind(models.TextChoices):
    ORDER_CREATED = "order_created", "Order created"
    ORDER_CANCELLED = "order_cancelled", "Order cancelled"


class Notification(BaseModel):
    kind = models.CharField(max_length=30, choices=NotificationKind.choices)
    message = models.CharField(max_length=500)
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )
    is_read = models.BooleanField(default=False)

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_read", "-created_at"], name="notif_read_created_idx"),
        ]

    def __str__(self) -> str:
        return f"[{self.kind}] {self.message}"
