"""Domain events for the Orders bounded context.

Extra fields are denormalized so handlers never need to read the order
back (the event may be consumed after the order changed again).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    order_number: str = ""
    user_name: str = ""
    total: str = "0.00"


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when a cancellation restored the order's stock."""

    order_number: str = ""
    user_name: str = ""
    previous_status: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every admin status write."""

    order_number: str = ""
    old_status: Optional[str] = None
    new_status: str = ""
