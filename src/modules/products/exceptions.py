"""Product and stock ledger exceptions.

Raised by ``ProductService`` and ``StockLedger`` when business rules are
violated.  The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist."""


class InvalidCategory(Exception):
    """The category referenced by a product does not exist."""


class InvalidSizeVariants(Exception):
    """A size list is malformed (blank or duplicate labels, negative quantities)."""


class StockRaceLost(Exception):
    """A conditional debit found less stock than the check phase saw.

    Another request debited the same product/size between the
    availability check and the update.
    """

    def __init__(self, product_id, size: str, quantity: int) -> None:
        self.product_id = product_id
        self.size = size
        self.quantity = quantity
        super().__init__(
            f"Stock for product {product_id} size {size} changed before "
            f"debiting {quantity}."
        )
