"""Category domain exceptions.

Raised by ``CategoryService`` when the hierarchy rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class CategoryNotFound(Exception):
    """The requested (or referenced parent) category does not exist."""


class DuplicateCategory(Exception):
    """A category with the same name already exists under the same parent."""


class DepthExceeded(Exception):
    """The operation would create a third level in the category tree."""


class SelfParent(Exception):
    """A category was assigned as its own parent."""
