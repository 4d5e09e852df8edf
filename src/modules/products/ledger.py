"""Stock ledger: the only code path that changes size-variant quantities.

Operations:
- ``check_availability``: read-only probe used by the validate phase.
- ``debit``: one conditional UPDATE (``quantity >= n``); raises
  ``StockRaceLost`` when the guard no longer holds.
- ``credit``: one UPDATE (``quantity + n``) under the product row lock;
  recreates the variant when the size was removed after the sale.
- ``replace_variants``: catalog edits of the whole size list.

The check is advisory; the debit's WHERE clause is what keeps quantities
non-negative when requests race.
"""

from __future__ import annotations

import enum
from collections import OrderedDict
from typing import TYPE_CHECKING, Iterable, List, Sequence, Tuple
from uuid import UUID

import structlog
from django.db import transaction

from modules.products.exceptions import InvalidSizeVariants, StockRaceLost
from modules.products.models import normalize_size

if TYPE_CHECKING:
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class Availability(str, enum.Enum):
    AVAILABLE = "available"
    INSUFFICIENT = "insufficient"
    PRODUCT_NOT_FOUND = "product_not_found"
    SIZE_NOT_FOUND = "size_not_found"

    @property
    def ok(self) -> bool:
        return self is Availability.AVAILABLE


class StockLedger:
    """Per-product, per-size stock authority.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, product_repository: IProductRepository) -> None:
        self._repo = product_repository

    def check_availability(
        self, product_id: UUID, size: str, requested_qty: int
    ) -> Availability:
        if self._repo.get_by_id(str(product_id)) is None:
            return Availability.PRODUCT_NOT_FOUND
        variant = self._repo.get_variant(product_id, size)
        if variant is None:
            return Availability.SIZE_NOT_FOUND
        if variant.quantity < requested_qty:
            return Availability.INSUFFICIENT
        return Availability.AVAILABLE

    def debit(self, product_id: UUID, size: str, qty: int) -> None:
        """Take ``qty`` units out of the variant or raise ``StockRaceLost``."""
        log = logger.bind(product_id=str(product_id), size=normalize_size(size), qty=qty)
        if not self._repo.decrement_if_available(product_id, size, qty):
            log.warning("ledger.debit_race_lost")
            raise StockRaceLost(product_id, normalize_size(size), qty)
        log.info("ledger.debited")

    @transaction.atomic
    def credit(self, product_id: UUID, size: str, qty: int) -> bool:
        """Put ``qty`` units back; returns ``False`` if the product is gone."""
        log = logger.bind(product_id=str(product_id), size=normalize_size(size), qty=qty)

        product = self._repo.get_for_update(str(product_id))
        if product is None:
            log.warning("ledger.credit_product_missing")
            return False

        if self._repo.increment(product_id, size, qty):
            log.info("ledger.credited")
        else:
            self._repo.add_variant(product_id, normalize_size(size), qty)
            log.info("ledger.variant_recreated")
        return True

    @transaction.atomic
    def replace_variants(
        self, product_id: UUID, sizes: Iterable[Tuple[str, int]]
    ) -> None:
        """Overwrite the size list of a product (catalog edit).

        Raises:
            InvalidSizeVariants: blank/duplicate labels or negative quantity.
        """
        cleaned = validate_sizes(sizes)
        self._repo.get_for_update(str(product_id))
        self._repo.replace_variants(product_id, cleaned)
        logger.info(
            "ledger.variants_replaced",
            product_id=str(product_id),
            sizes=[size for size, _ in cleaned],
        )


def validate_sizes(sizes: Iterable[Tuple[str, int]]) -> List[Tuple[str, int]]:
    """Normalise labels and reject blank, duplicate or negative entries."""
    seen: "OrderedDict[str, int]" = OrderedDict()
    for size, quantity in sizes:
        label = normalize_size(size)
        if not label:
            raise InvalidSizeVariants("Size label must not be empty.")
        if label in seen:
            raise InvalidSizeVariants(f"Duplicate size label: {label}.")
        if quantity is None or int(quantity) < 0:
            raise InvalidSizeVariants(f"Quantity for size {label} cannot be negative.")
        seen[label] = int(quantity)
    return list(seen.items())


def merge_requests(
    items: Sequence[Tuple[UUID, str, int]],
) -> "OrderedDict[Tuple[UUID, str], int]":
    """Sum requested quantities per ``(product, size)`` pair, keeping first-seen order."""
    totals: "OrderedDict[Tuple[UUID, str], int]" = OrderedDict()
    for product_id, size, quantity in items:
        key = (product_id, normalize_size(size))
        totals[key] = totals.get(key, 0) + quantity
    return totals
