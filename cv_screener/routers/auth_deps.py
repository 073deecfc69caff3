"""
Caller identity dependencies.
A caller is a Profile identified by an opaque bearer API token.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cv_screener.core.config import settings
from cv_screener.core.security import hash_api_token
from cv_screener.database import get_db
from cv_screener.models.profile import Profile

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_optional_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[Profile]:
    """
    Resolves the bearer token to a Profile.
    No token -> None. A token that matches nobody is always rejected.
    """
    if credentials is None or not credentials.credentials:
        return None

    profile = db.query(Profile).filter(
        Profile.api_token_hash == hash_api_token(credentials.credentials)
    ).first()
    if profile is None:
        logger.warning("Authentication failed: Unknown API token")
        raise _unauthorized("Could not validate credentials")
    return profile


def require_caller(caller: Optional[Profile] = Depends(get_optional_caller)) -> Profile:
    if caller is None:
        raise _unauthorized("Not authenticated")
    return caller


def get_caller(caller: Optional[Profile] = Depends(get_optional_caller)) -> Optional[Profile]:
    """Identity is mandatory only when REQUIRE_AUTH is on."""
    if caller is None and settings.require_auth:
        raise _unauthorized("Not authenticated")
    return caller
