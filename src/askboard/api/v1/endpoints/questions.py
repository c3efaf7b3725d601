"""Question-related endpoints for the askboard API."""

from fastapi import APIRouter, Query, status

from askboard.api.v1.dependencies import CurrentUserDep, NotifierDep, SessionDep
from askboard.api.v1.errors import to_http_exception
from askboard.models import Comment, Question
from askboard.schemas.comment import CommentResponse
from askboard.schemas.question import QuestionCreate, QuestionResponse
from askboard.services.comments import CommentService
from askboard.services.errors import AskboardError
from askboard.services.questions import QuestionService

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def ask_question(
    question_data: QuestionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Question:
    """Ask a new question, subject to the daily question cap."""
    try:
        return QuestionService(db).ask(current_user.id, question_data.title, question_data.details)
    except AskboardError as err:
        raise to_http_exception(err) from err


@router.get("", response_model=list[QuestionResponse])
async def list_questions(
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100, description="Maximum number of questions to return"),
) -> list[Question]:
    """List questions, newest first."""
    try:
        return QuestionService(db).list_recent(limit)
    except AskboardError as err:
        raise to_http_exception(err) from err


@router.get("/mine", response_model=list[QuestionResponse])
async def list_my_questions(
    current_user: CurrentUserDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100),
) -> list[Question]:
    """List the caller's own questions, newest first."""
    try:
        return QuestionService(db).list_for_user(current_user.id, limit)
    except AskboardError as err:
        raise to_http_exception(err) from err


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(question_id: int, db: SessionDep) -> Question:
    """Return a single question."""
    try:
        return QuestionService(db).get(question_id)
    except AskboardError as err:
        raise to_http_exception(err) from err


@router.get("/{question_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    question_id: int,
    db: SessionDep,
    notifier: NotifierDep,
) -> list[Comment]:
    """Return a question's comments: pinned first, then oldest first."""
    try:
        return CommentService(db, notifier).list_ordered(question_id)
    except AskboardError as err:
        raise to_http_exception(err) from err
