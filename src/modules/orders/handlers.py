"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    """Writes the status change to the audit log stream."""

    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.status_change_published",
            order_id=str(event.aggregate_id),
            order_number=event.order_number,
            old_status=event.old_status,
            new_status=event.new_status,
        )


order_status_changed_handler = OrderStatusChangedHandler()
