"""Category DTOs for the Service Layer.

Pydantic v2 contracts between the API layer (DRF Serializers) and
``CategoryService``.  DTOs are immutable (``frozen=True``).

``UpdateCategoryDTO`` is partial: only fields present in
``model_fields_set`` are applied, which is how an explicit
``"parent": null`` (move to root) is told apart from an omitted parent.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


def _clean_name(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("Category name required")
    return v


class CreateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    image: str = ""
    banner_image: str = ""
    meta_title: str = ""
    meta_description: str = ""
    is_featured: bool = False
    is_active: bool = True
    parent_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        return _clean_name(v)


class UpdateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    banner_image: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None
    parent_id: Optional[UUID] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _clean_name(v)


class CategoryDeletionSummary(BaseModel):
    """Result of a cascading category deletion."""

    model_config = ConfigDict(frozen=True)

    category_id: UUID
    categories_deleted: int
    products_deleted: int
