"""Vote-related endpoints for the askboard API."""

from fastapi import APIRouter, status

from askboard.api.v1.dependencies import CurrentUserDep, NotifierDep, SessionDep
from askboard.api.v1.errors import ensure_same_user, to_http_exception
from askboard.schemas.vote import VoteResult, VoteStatus, VoteToggle
from askboard.services.errors import AskboardError
from askboard.services.votes import VoteToggleService

router = APIRouter(prefix="/vote", tags=["votes"])


@router.post("", response_model=VoteResult, status_code=status.HTTP_200_OK)
async def toggle_vote(
    vote_data: VoteToggle,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifier: NotifierDep,
) -> VoteResult:
    """Cast or retract the caller's upvote and return the stored count."""
    ensure_same_user(current_user.id, vote_data.user_id)
    service = VoteToggleService(db, notifier)
    try:
        new_count = service.toggle(
            vote_data.subject_id,
            current_user.id,
            vote_data.believed_currently_voted,
        )
    except AskboardError as err:
        raise to_http_exception(err) from err
    return VoteResult(new_vote_count=new_count)


@router.get("/{subject_id}", response_model=VoteStatus)
async def get_my_vote(
    subject_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifier: NotifierDep,
) -> VoteStatus:
    """Return whether the caller has voted on a question, plus its count."""
    service = VoteToggleService(db, notifier)
    try:
        has_voted = service.has_voted(subject_id, current_user.id)
        vote_count = service.current_count(subject_id)
    except AskboardError as err:
        raise to_http_exception(err) from err
    return VoteStatus(subject_id=subject_id, has_voted=has_voted, vote_count=vote_count)
