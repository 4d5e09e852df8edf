"""Category model for the two-level catalog tree.

Business rules implemented:
- A root category has ``parent = NULL`` (e.g. Men, Women, Kids).
- A sub-category points at a root (e.g. Men > T-Shirts).  The depth limit
  (no sub-sub-categories) is enforced by ``CategoryService``.
- A category can never be its own parent (database check constraint).
- ``slug`` is unique and derived from ``name`` by the service layer.
- ``parent`` uses PROTECT: the cascade is performed explicitly by the
  service so that children and their products are removed in order.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Category(BaseModel):
    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True)
    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )
    description = models.TextField(blank=True, default="")
    image = models.CharField(max_length=500, blank=True, default="")
    banner_image = models.CharField(max_length=500, blank=True, default="")
    meta_title = models.CharField(max_length=255, blank=True, default="")
    meta_description = models.TextField(blank=True, default="")
    is_featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "categories"
        ordering = ["name"]
        verbose_name_plural = "categories"
        indexes = [
            models.Index(fields=["parent", "name"], name="categories_parent_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(parent=models.F("id")),
                name="categories_not_self_parent",
            ),
        ]

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def __str__(self) -> str:
        return self.name
