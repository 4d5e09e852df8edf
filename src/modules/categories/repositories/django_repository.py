"""Django ORM implementation of the Category repository.

Look-ups follow the Null Object pattern: malformed or unknown ids give
``None`` instead of raising, and the service decides what that means.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.categories.models import Category
from modules.categories.repositories.interfaces import ICategoryRepository

logger = structlog.get_logger(__name__)


class CategoryDjangoRepository(ICategoryRepository):
    """Concrete Category repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Category]:
        try:
            return Category.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Category]:
        try:
            return Category.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        queryset = Category.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_active(self) -> List[Category]:
        return list(Category.objects.filter(is_active=True).order_by("name"))

    @transaction.atomic
    def save(self, entity: Category) -> Category:
        entity.save()
        logger.info("category.saved", category_id=str(entity.id), slug=entity.slug)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        category = self.get_by_id(id)
        if not category:
            return False
        category.delete()
        logger.info("category.deleted", category_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Hierarchy look-ups
    # ------------------------------------------------------------------

    def name_exists(
        self,
        name: str,
        parent_id: Optional[UUID],
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        queryset = Category.objects.filter(name__iexact=name.strip(), parent_id=parent_id)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def slug_exists(self, slug: str, exclude_id: Optional[UUID] = None) -> bool:
        queryset = Category.objects.filter(slug=slug)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def has_children(self, id: UUID) -> bool:
        return Category.objects.filter(parent_id=id).exists()

    def child_ids(self, id: UUID) -> List[UUID]:
        return list(Category.objects.filter(parent_id=id).values_list("id", flat=True))

    @transaction.atomic
    def delete_many(self, ids: Sequence[UUID]) -> int:
        if not ids:
            return 0
        _, per_model = Category.objects.filter(id__in=list(ids)).delete()
        return per_model.get(Category._meta.label, 0)
