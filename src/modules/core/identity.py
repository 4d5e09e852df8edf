"""Caller identity helpers.

Authentication is delegated to Django auth + SimpleJWT.  The rest of the
project only needs ``{_id, name, email, role}``; ``role`` is ``"admin"``
for staff users and ``"user"`` otherwise.
"""

from __future__ import annotations

from typing import Any, Dict

ADMIN_ROLE = "admin"
USER_ROLE = "user"


def display_name(user: Any) -> str:
    full_name = user.get_full_name().strip() if hasattr(user, "get_full_name") else ""
    return full_name or user.get_username()


def is_admin(user: Any) -> bool:
    return bool(user and user.is_authenticated and user.is_staff)


def caller_identity(user: Any) -> Dict[str, Any]:
    return {
        "_id": str(user.pk),
        "name": display_name(user),
        "email": user.email,
        "role": ADMIN_ROLE if is_admin(user) else USER_ROLE,
    }
