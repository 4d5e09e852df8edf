"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line item.
- ``CreateOrderDTO``: input for order creation (nested items).
- ``UpdateOrderStatusDTO``: input for the admin status write.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    The frontend sends ``product_id``, ``selected_size`` and ``quantity``.
    Name, unit price and image are resolved by the Service Layer from the
    product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    selected_size: str
    quantity: int

    @field_validator("selected_size")
    @classmethod
    def size_must_not_be_blank(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("Selected size is required.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``items`` may be empty here; the service rejects an empty cart with
    its own error so the message matches the checkout contract.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    user_name: str = ""
    user_email: str = ""
    items: List[CreateOrderItemDTO] = []
    payment_method: Optional[str] = None
    idempotency_key: Optional[str] = None


class UpdateOrderStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: UUID
    status: str
    notes: str = ""
    changed_by_id: Optional[int] = None
