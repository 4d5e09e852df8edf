"""Order event handlers feeding the admin inbox.

Events arrive from the outbox publisher, possibly after the order was
deleted, so the order reference is only kept when the row still exists.
"""

from __future__ import annotations

import structlog

from modules.notifications.models import NotificationKind
from modules.notifications.repositories.django_repository import (
    NotificationDjangoRepository,
)
from modules.notifications.services import NotificationService
from modules.orders.events import OrderCancelled, OrderCreated
from modules.orders.models import Order
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


def _existing_order_id(event):
    return event.aggregate_id if Order.objects.filter(id=event.aggregate_id).exists() else None


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        NotificationService(NotificationDjangoRepository()).notify(
            NotificationKind.ORDER_CREATED,
            f"New order {event.order_number} placed by {event.user_name} "
            f"(total {event.total})",
            order_id=_existing_order_id(event),
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        NotificationService(NotificationDjangoRepository()).notify(
            NotificationKind.ORDER_CANCELLED,
            f"Order {event.order_number} of {event.user_name} was cancelled; "
            f"stock restored",
            order_id=_existing_order_id(event),
        )


order_created_handler = OrderCreatedHandler()
order_cancelled_handler = OrderCancelledHandler()
