"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from askboard.api.v1.errors import error_body
from askboard.core.security import JWTError, decode_subject
from askboard.db.session import get_db
from askboard.models import Profile
from askboard.schemas.common import ErrorDetail
from askboard.services.notifier import ChangeNotifier, get_notifier

# HTTP Bearer scheme for JWT authentication; missing headers are reported as 401 below.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=error_body(ErrorDetail(code="Unauthorized", message=detail)),
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Profile:
    """Resolve the session user from the bearer token.

    Args:
        credentials: HTTP Bearer token credentials, if any
        db: Database session

    Returns:
        Profile of the authenticated user, including its role

    Raises:
        HTTPException: 401 if the token is missing, invalid or unknown
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        user_id = decode_subject(credentials.credentials)
    except JWTError as err:
        raise _unauthorized("Could not validate credentials") from err
    if user_id is None:
        raise _unauthorized("Could not validate credentials")

    user = db.get(Profile, user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_notifier_dep() -> ChangeNotifier:
    """Return the process-wide change notifier."""
    return get_notifier()


# Type alias for current user dependency
CurrentUserDep = Annotated[Profile, Depends(get_current_user)]
NotifierDep = Annotated[ChangeNotifier, Depends(get_notifier_dep)]
