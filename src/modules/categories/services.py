"""Category service layer: the hierarchy guard.

Business rules enforced:
- The tree has at most two levels: a parent must itself be a root, and a
  category that already has children cannot be moved under another one.
- A category cannot be its own parent.
- Names are unique (case-insensitive) within one parent scope.
- Slugs are unique; collisions get a numeric suffix.
- Deleting a category removes its children, every product attached to
  the children or to the category itself, then the category, in one
  transaction.  Order line items keep their snapshots.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils.text import slugify

from modules.categories.dtos import CategoryDeletionSummary
from modules.categories.exceptions import (
    CategoryNotFound,
    DepthExceeded,
    DuplicateCategory,
    SelfParent,
)
from modules.categories.models import Category

if TYPE_CHECKING:
    from modules.categories.dtos import CreateCategoryDTO, UpdateCategoryDTO
    from modules.categories.repositories.interfaces import ICategoryRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

SLUG_MAX_ATTEMPTS = 100

_UPDATABLE_FIELDS = (
    "description",
    "image",
    "banner_image",
    "meta_title",
    "meta_description",
    "is_featured",
    "is_active",
)


class CategoryService:
    """Application service for Category use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        category_repository: ICategoryRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._repo = category_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_category(self, dto: CreateCategoryDTO) -> Category:
        """Create a root or sub-category.

        Raises:
            CategoryNotFound: the parent does not exist.
            DepthExceeded: the parent is itself a sub-category.
            DuplicateCategory: same name already used under that parent.
        """
        log = logger.bind(name=dto.name, parent_id=str(dto.parent_id or ""))

        if dto.parent_id is not None:
            self._validate_parent(dto.parent_id)

        if self._repo.name_exists(dto.name, dto.parent_id):
            log.warning("category.duplicate_name")
            raise DuplicateCategory(
                "Conflict: This category label already exists at this level"
            )

        category = Category(
            name=dto.name,
            slug=self._unique_slug(dto.name),
            parent_id=dto.parent_id,
            description=dto.description,
            image=dto.image,
            banner_image=dto.banner_image,
            meta_title=dto.meta_title,
            meta_description=dto.meta_description,
            is_featured=dto.is_featured,
            is_active=dto.is_active,
        )
        category = self._repo.save(category)
        log.info("category.created", category_id=str(category.id), slug=category.slug)
        return category

    @transaction.atomic
    def update_category(self, id: str, dto: UpdateCategoryDTO) -> Category:
        """Apply a partial update, re-validating the hierarchy rules.

        Raises:
            CategoryNotFound: the category or the new parent does not exist.
            SelfParent: the category was set as its own parent.
            DepthExceeded: the move would create a third level.
            DuplicateCategory: the new name/parent pair is taken.
        """
        category = self._repo.get_for_update(id)
        if not category:
            raise CategoryNotFound("Category not found")

        log = logger.bind(category_id=str(category.id))
        provided = dto.model_fields_set

        parent_id = category.parent_id
        if "parent_id" in provided:
            parent_id = dto.parent_id
            if parent_id is not None:
                if parent_id == category.id:
                    log.warning("category.self_parent")
                    raise SelfParent("A category cannot be its own parent.")
                self._validate_parent(parent_id)
                if self._repo.has_children(category.id):
                    log.warning("category.depth_exceeded", reason="has_children")
                    raise DepthExceeded(
                        "Only 2-level depth allowed (Main > Sub): "
                        "this category has sub-categories"
                    )

        name = dto.name if dto.name is not None else category.name
        if (name.lower(), parent_id) != (category.name.lower(), category.parent_id):
            if self._repo.name_exists(name, parent_id, exclude_id=category.id):
                log.warning("category.duplicate_name", name=name)
                raise DuplicateCategory(
                    "Conflict: This category label already exists at this level"
                )

        if name != category.name:
            category.slug = self._unique_slug(name, exclude_id=category.id)
        category.name = name
        category.parent_id = parent_id

        for field in _UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(category, field, value)

        category = self._repo.save(category)
        log.info("category.updated", parent_id=str(parent_id or ""))
        return category

    @transaction.atomic
    def delete_category(self, id: str) -> CategoryDeletionSummary:
        """Delete a category and everything hanging off it.

        Order: children's products → children → own products → self.
        The target row is locked first so two concurrent deletes of the
        same tree serialize; the whole cascade commits or rolls back as a
        unit, and re-running it after a failure converges to the same end
        state.

        Raises:
            CategoryNotFound: the category does not exist.
        """
        category = self._repo.get_for_update(id)
        if not category:
            raise CategoryNotFound("Target category not found")

        log = logger.bind(category_id=str(category.id), is_root=category.is_root)
        categories_deleted = 0
        products_deleted = 0

        if category.is_root:
            child_ids = self._repo.child_ids(category.id)
            products_deleted += self._product_repo.delete_by_categories(child_ids)
            categories_deleted += self._repo.delete_many(child_ids)
            log.info(
                "category.children_purged",
                child_count=len(child_ids),
                products_deleted=products_deleted,
            )

        products_deleted += self._product_repo.delete_by_categories([category.id])
        categories_deleted += self._repo.delete_many([category.id])

        log.info(
            "category.cascade_deleted",
            categories_deleted=categories_deleted,
            products_deleted=products_deleted,
        )
        return CategoryDeletionSummary(
            category_id=category.id,
            categories_deleted=categories_deleted,
            products_deleted=products_deleted,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_category(self, id: str) -> Category:
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound("Category not found")
        return category

    def category_tree(self) -> List[Dict[str, Any]]:
        """Active roots, each with its active direct children.

        Returns ``[{"category": root, "sub_categories": [child, ...]}]``
        ordered by name at both levels.
        """
        categories = self._repo.list_active()
        children: Dict[UUID, List[Category]] = {}
        for category in categories:
            if category.parent_id is not None:
                children.setdefault(category.parent_id, []).append(category)
        return [
            {"category": root, "sub_categories": children.get(root.id, [])}
            for root in categories
            if root.parent_id is None
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_parent(self, parent_id: UUID) -> Category:
        parent = self._repo.get_by_id(str(parent_id))
        if not parent:
            raise CategoryNotFound("Parent category not found")
        if not parent.is_root:
            logger.warning("category.depth_exceeded", parent_id=str(parent_id))
            raise DepthExceeded("Only 2-level depth allowed (Main > Sub)")
        return parent

    def _unique_slug(self, name: str, exclude_id: Optional[UUID] = None) -> str:
        base = slugify(name) or "category"
        candidate = base
        for suffix in range(2, SLUG_MAX_ATTEMPTS + 2):
            if not self._repo.slug_exists(candidate, exclude_id=exclude_id):
                return candidate
            candidate = f"{base}-{suffix}"
        raise RuntimeError(
            f"Failed to generate unique slug for {name!r} after "
            f"{SLUG_MAX_ATTEMPTS} attempts"
        )
