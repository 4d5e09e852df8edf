"""Product service layer (catalog use cases).

Orchestrates catalog edits for the Product aggregate.  Product fields are
written through ``IProductRepository``; size lists always go through
``StockLedger`` so quantities have a single writer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import InvalidCategory, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.categories.repositories.interfaces import ICategoryRepository
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.ledger import StockLedger
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_SCALAR_FIELDS = ("name", "price", "description", "images", "is_featured", "is_active")


class ProductService:
    """Application service for Product use-cases.

    Receives repositories and the ledger via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        category_repository: ICategoryRepository,
        ledger: StockLedger,
    ) -> None:
        self._repo = repository
        self._category_repo = category_repository
        self._ledger = ledger

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a product and its initial size variants.

        Raises:
            InvalidCategory: the category does not exist.
            InvalidSizeVariants: duplicate size labels.
        """
        if not self._category_repo.get_by_id(str(dto.category_id)):
            raise InvalidCategory("The selected category does not exist")

        product = Product(
            name=dto.name,
            price=dto.price,
            category_id=dto.category_id,
            description=dto.description,
            images=list(dto.images),
            is_featured=dto.is_featured,
            is_active=dto.is_active,
        )
        product = self._repo.save(product)
        self._ledger.replace_variants(
            product.id, [(s.size, s.quantity) for s in dto.sizes]
        )
        logger.info("product.created", product_id=str(product.id))
        return self._repo.get_by_id(str(product.id))

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: the product does not exist.
            InvalidCategory: the new category does not exist.
            InvalidSizeVariants: duplicate size labels.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound("Product not found")

        log = logger.bind(product_id=str(product.id))

        if dto.category_id is not None:
            if not self._category_repo.get_by_id(str(dto.category_id)):
                raise InvalidCategory("The new category selected is invalid")
            product.category_id = dto.category_id

        for field in _SCALAR_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        self._repo.save(product)
        if dto.sizes is not None:
            self._ledger.replace_variants(
                product.id, [(s.size, s.quantity) for s in dto.sizes]
            )

        log.info("product.updated")
        return self._repo.get_by_id(str(product.id))

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Permanently remove a product and its size variants.

        Raises:
            ProductNotFound: the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound("Product not found")
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound("Product not found")
        return product
