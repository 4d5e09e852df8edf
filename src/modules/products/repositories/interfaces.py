"""Product repository interface.

Extends ``IRepository[Product]`` with the primitives the stock ledger
builds on.  Quantity writes are expressed as single conditional UPDATEs
so implementations never read-then-write a counter.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Tuple
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product, ProductSize


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate and its size variants."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used by the ledger to serialize credits and variant replacement.
        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def get_variant(self, product_id: UUID, size: str) -> Optional[ProductSize]:
        """The variant with the (normalised) label, or ``None``."""

    @abstractmethod
    def decrement_if_available(self, product_id: UUID, size: str, quantity: int) -> bool:
        """Atomically ``quantity -= n`` only where ``quantity >= n``.

        Returns ``False`` when no row matched.
        """

    @abstractmethod
    def increment(self, product_id: UUID, size: str, quantity: int) -> bool:
        """Atomically ``quantity += n``; ``False`` if the variant is missing."""

    @abstractmethod
    def add_variant(self, product_id: UUID, size: str, quantity: int) -> ProductSize:
        """Append a new variant at the end of the product's size list."""

    @abstractmethod
    def replace_variants(
        self, product_id: UUID, sizes: Iterable[Tuple[str, int]]
    ) -> None:
        """Replace the full variant list, preserving the given order."""

    @abstractmethod
    def delete_by_categories(self, category_ids: Sequence[UUID]) -> int:
        """Hard-delete every product in the given categories; returns the count."""
