"""Product and ProductSize models.

Business rules implemented:
- Price cannot be negative.
- A product belongs to exactly one category; PROTECT forces category
  deletion to remove products explicitly (see ``CategoryService``).
- Stock is tracked per size variant (``ProductSize``), never on the
  product itself.
- Size labels are normalised to upper case and unique per product.
- Variant quantity cannot be negative (check constraint backs the
  conditional UPDATE used by ``StockLedger.debit``).
- Deleting a product deletes its size variants.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


def normalize_size(size: str) -> str:
    """Canonical form of a size label (``" m "`` → ``"M"``)."""
    return (size or "").strip().upper()


class Product(BaseModel):
    """Product aggregate root; its size variants are the stock ledger rows."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    category = models.ForeignKey(
        "categories.Category",
        on_delete=models.PROTECT,
        related_name="products",
    )
    images = models.JSONField(default=list, blank=True)
    is_featured = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                name=self.name,
                category_id=str(self.category_id),
            )

    def __str__(self) -> str:
        return self.name


class ProductSize(BaseModel):
    """A ``(size label, quantity)`` pair; the unit of stock tracking."""

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="sizes",
    )
    size = models.CharField(max_length=20)
    quantity = models.PositiveIntegerField(default=0)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = "product_sizes"
        ordering = ["position", "created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "size"],
                name="product_sizes_unique_label",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="product_sizes_quantity_non_negative",
            ),
        ]

    def save(self, *args, **kwargs) -> None:
        self.size = normalize_size(self.size)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_id}:{self.size}={self.quantity}"
