"""Order domain constants.

Defines the status choices of the order state machine.  Every status may
be set to every other status by an admin; only the move into
``CANCELLED`` from a non-cancelled status has a stock side effect.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    COMPLETED = "Completed", "Completed"
    CANCELLED = "Cancelled", "Cancelled"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus | None":
        """Case-insensitive lookup; ``None`` for unknown labels."""
        wanted = (value or "").strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


ORDER_NUMBER_MAX_RETRIES = 5
