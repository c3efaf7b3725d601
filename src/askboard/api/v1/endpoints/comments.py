"""Comment-related endpoints for the askboard API."""

from fastapi import APIRouter, status

from askboard.api.v1.dependencies import CurrentUserDep, NotifierDep, SessionDep
from askboard.api.v1.errors import ensure_same_user, to_http_exception
from askboard.schemas.comment import CommentCreate, CommentCreated, CommentResponse
from askboard.services.comments import CommentService
from askboard.services.errors import AskboardError

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentCreated, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifier: NotifierDep,
) -> CommentCreated:
    """Submit a comment; the admin badge comes from the caller's role."""
    ensure_same_user(current_user.id, comment_data.user_id)
    service = CommentService(db, notifier)
    try:
        comment = service.create(comment_data.subject_id, current_user.id, comment_data.content)
    except AskboardError as err:
        raise to_http_exception(err) from err
    return CommentCreated(comment=CommentResponse.model_validate(comment))
