"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist."""


class EmptyCart(Exception):
    """An order was submitted without line items."""


class InvalidOrderStatus(Exception):
    """The requested status is not one of the known order statuses."""


class InsufficientStock(Exception):
    """Not enough stock of a product size to fulfil the order."""


class ProductNotFound(Exception):
    """A product referenced by an order item does not exist."""


class IdempotencyKeyReused(Exception):
    """The ``Idempotency-Key`` already belongs to another user's order."""
