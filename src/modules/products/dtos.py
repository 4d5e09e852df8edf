"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``SizeVariantDTO``: one ``(size, quantity)`` entry.
- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class SizeVariantDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: str
    quantity: int = 0

    @field_validator("size")
    @classmethod
    def size_must_not_be_blank(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("Size label must not be empty.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Quantity cannot be negative.")
        return v


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is not blank.
    - ``price`` is a non-negative Decimal.
    - at least one image URL is given.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    category_id: UUID
    description: str = ""
    images: List[str]
    sizes: List[SizeVariantDTO] = []
    is_featured: bool = False
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product name must not be empty.")
        return v

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("images")
    @classmethod
    def at_least_one_image(cls, v: List[str]) -> List[str]:
        v = [url for url in v if url and url.strip()]
        if not v:
            raise ValueError("At least one image is required")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    ``sizes``, when given, replaces the whole variant list.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    price: Optional[Decimal] = None
    category_id: Optional[UUID] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None
    sizes: Optional[List[SizeVariantDTO]] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("images")
    @classmethod
    def images_not_emptied(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        v = [url for url in v if url and url.strip()]
        if not v:
            raise ValueError("At least one image is required")
        return v
