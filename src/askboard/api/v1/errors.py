"""Translation of domain errors into HTTP responses."""

from fastapi import HTTPException, status

from askboard.schemas.common import ErrorDetail
from askboard.services.errors import (
    AskboardError,
    Conflict,
    Forbidden,
    NotFound,
    RateLimited,
    StorageFailure,
    Unauthorized,
)

_STATUS_BY_ERROR: dict[type[AskboardError], int] = {
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    RateLimited: status.HTTP_429_TOO_MANY_REQUESTS,
    StorageFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_STORAGE_MESSAGE = "An unexpected storage error occurred."


def to_http_exception(err: AskboardError) -> HTTPException:
    """Build the HTTPException matching ``err``'s place in the error taxonomy."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for cls in type(err).__mro__:
        if cls in _STATUS_BY_ERROR:
            status_code = _STATUS_BY_ERROR[cls]
            break

    detail = ErrorDetail(
        code=err.code,
        message=GENERIC_STORAGE_MESSAGE if isinstance(err, StorageFailure) else err.message,
        vote_count=err.vote_count if isinstance(err, Conflict) else None,
    )
    return HTTPException(status_code=status_code, detail=error_body(detail))


def error_body(detail: ErrorDetail) -> dict[str, object]:
    """Serialize ``detail`` as the camelCase ``detail`` payload of an error response."""
    return detail.model_dump(by_alias=True, exclude_none=True)


def ensure_same_user(current_user_id: str, claimed_user_id: str | None) -> None:
    """Reject bodies that name a different user than the session."""
    if claimed_user_id is not None and claimed_user_id != current_user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_body(
                ErrorDetail(code="Forbidden", message="userId does not match the session user")
            ),
        )
