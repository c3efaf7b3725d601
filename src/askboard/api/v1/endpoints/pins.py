"""Pin endpoints for the askboard API."""

from fastapi import APIRouter

from askboard.api.v1.dependencies import CurrentUserDep, NotifierDep, SessionDep
from askboard.api.v1.errors import to_http_exception
from askboard.schemas.comment import CommentResponse
from askboard.schemas.pin import PinRequest, PinResult
from askboard.services.errors import AskboardError
from askboard.services.pins import PinAuthority

router = APIRouter(prefix="/pin", tags=["pins"])


@router.post("", response_model=PinResult)
async def set_pin(
    pin_data: PinRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifier: NotifierDep,
) -> PinResult:
    """Set a comment's pin flag; privileged roles only."""
    authority = PinAuthority(db, notifier)
    try:
        comment = authority.set_pinned(
            pin_data.comment_id,
            pin_data.desired_pinned,
            current_user.id,
            question_id=pin_data.subject_id,
        )
    except AskboardError as err:
        raise to_http_exception(err) from err
    return PinResult(is_pinned=comment.is_pinned, comment=CommentResponse.model_validate(comment))
