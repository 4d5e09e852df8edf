"""Event bus contracts.

Handlers implement ``handle(event)``; the bus maps
event classes to handlers and, because the outbox stores events by name,
can turn a stored ``event_name`` back into its class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent)


class IEventHandler(ABC, Generic[E]):
    @abstractmethod
    def handle(self, event: E) -> None:
        """React to ``event``; exceptions propagate to the publisher."""


class IEventBus(ABC):
    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to every handler subscribed to its class."""

    @abstractmethod
    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None:
        """Register ``handler``; registering the same handler twice is a no-op."""

    @abstractmethod
    def resolve(self, event_name: str) -> Optional[Type[DomainEvent]]:
        """Event class subscribed under ``event_name``, ``None`` if unknown."""
