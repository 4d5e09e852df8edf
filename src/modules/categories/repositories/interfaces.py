"""Category repository interface.

Extends ``IRepository[Category]`` with the look-ups the hierarchy guard
needs: scoped name uniqueness, slug collisions, child listing, a locked
read for deletion, and the bulk deletes of the cascade.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.categories.models import Category


class ICategoryRepository(IRepository["Category"]):
    """Repository contract for the Category tree."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Category]:
        """Retrieve a category with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def name_exists(
        self,
        name: str,
        parent_id: Optional[UUID],
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        """Case-insensitive name match within one parent scope."""

    @abstractmethod
    def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        """Whether ``slug`` is taken by another category."""

    @abstractmethod
    def has_children(self, id: UUID) -> bool:
        """Whether any category references ``id`` as its parent."""

    @abstractmethod
    def child_ids(self, id: UUID) -> List[UUID]:
        """Primary keys of the direct children of ``id``."""

    @abstractmethod
    def delete_many(self, ids: Sequence[UUID]) -> int:
        """Hard-delete the given categories; returns the number removed."""

    @abstractmethod
    def list_active(self) -> List[Category]:
        """Active categories ordered by name."""
