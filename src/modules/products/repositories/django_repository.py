"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.

Stock writes are single ``UPDATE ... SET quantity = quantity ± n``
statements built from ``F()`` expressions; the debit carries a
``quantity >= n`` guard in its WHERE clause.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Max
from django.utils import timezone

from modules.products.models import Product, ProductSize, normalize_size
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product (with its sizes) by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Product.objects.select_related("category")
                .prefetch_related("sizes")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category_id": "..."}
            {"name__icontains": "tee"}
        """
        queryset = Product.objects.select_related("category").prefetch_related("sizes")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a product; its size variants go with it."""
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Stock primitives
    # ------------------------------------------------------------------

    def get_variant(self, product_id: UUID, size: str) -> Optional[ProductSize]:
        return ProductSize.objects.filter(
            product_id=product_id, size=normalize_size(size)
        ).first()

    def decrement_if_available(self, product_id: UUID, size: str, quantity: int) -> bool:
        updated = ProductSize.objects.filter(
            product_id=product_id,
            size=normalize_size(size),
            quantity__gte=quantity,
        ).update(quantity=F("quantity") - quantity, updated_at=timezone.now())
        return updated > 0

    def increment(self, product_id: UUID, size: str, quantity: int) -> bool:
        updated = ProductSize.objects.filter(
            product_id=product_id,
            size=normalize_size(size),
        ).update(quantity=F("quantity") + quantity, updated_at=timezone.now())
        return updated > 0

    def add_variant(self, product_id: UUID, size: str, quantity: int) -> ProductSize:
        last = ProductSize.objects.filter(product_id=product_id).aggregate(
            last=Max("position")
        )["last"]
        return ProductSize.objects.create(
            product_id=product_id,
            size=size,
            quantity=quantity,
            position=0 if last is None else last + 1,
        )

    @transaction.atomic
    def replace_variants(
        self, product_id: UUID, sizes: Iterable[Tuple[str, int]]
    ) -> None:
        ProductSize.objects.filter(product_id=product_id).delete()
        ProductSize.objects.bulk_create(
            [
                ProductSize(
                    product_id=product_id,
                    size=normalize_size(size),
                    quantity=quantity,
                    position=position,
                )
                for position, (size, quantity) in enumerate(sizes)
            ]
        )

    @transaction.atomic
    def delete_by_categories(self, category_ids: Sequence[UUID]) -> int:
        if not category_ids:
            return 0
        _, per_model = Product.objects.filter(category_id__in=list(category_ids)).delete()
        return per_model.get(Product._meta.label, 0)
