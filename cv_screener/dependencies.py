"""
Shared request dependencies and authorization predicates.

The canonical identity dependencies live in cv_screener.routers.auth_deps.
This module re-exports them next to the ownership check used by services.
"""
from typing import Optional

from cv_screener.core.exceptions import AccessDeniedError
from cv_screener.models.profile import Profile
from cv_screener.routers.auth_deps import (
    get_caller,
    get_optional_caller,
    require_caller,
)


def validate_owner_access(caller: Profile, owner_id: Optional[int]):
    """
    Ensure a caller only uses resources they own.
    Explicit equality between the resource owner and the caller identity.
    """
    if owner_id is None or caller.id != owner_id:
        raise AccessDeniedError("Access denied: resource belongs to a different user.")


__all__ = [
    "get_caller",
    "get_optional_caller",
    "require_caller",
    "validate_owner_access",
]
