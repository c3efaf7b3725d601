"""Data access helpers for questions and their vote counters."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from askboard.models.question import Question
from askboard.models.vote import QuestionUpvote

__all__ = ["QuestionRepository"]


class QuestionRepository:
    """Thin wrapper around database access for question entities.

    Counter changes are issued as single ``UPDATE ... RETURNING`` statements so
    concurrent increments and decrements never lose updates.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, question_id: int) -> Question | None:
        """Return a question by identifier."""
        return self.session.get(Question, question_id)

    def exists(self, question_id: int) -> bool:
        """Return True if the question exists."""
        stmt = select(Question.id).where(Question.id == question_id)
        return self.session.execute(stmt).first() is not None

    def get_upvotes(self, question_id: int) -> int | None:
        """Read the durable counter value, bypassing the identity map."""
        stmt = select(Question.upvotes).where(Question.id == question_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_recent(self, limit: int) -> list[Question]:
        """Return questions newest first."""
        stmt = (
            select(Question)
            .order_by(Question.created_at.desc(), Question.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def list_for_user(self, user_id: str, limit: int) -> list[Question]:
        """Return questions asked by ``user_id``, newest first."""
        stmt = (
            select(Question)
            .where(Question.user_id == user_id)
            .order_by(Question.created_at.desc(), Question.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count_asked_since(self, user_id: str, since: datetime) -> int:
        """Return how many questions ``user_id`` asked at or after ``since``."""
        stmt = select(func.count()).select_from(Question).where(
            Question.user_id == user_id,
            Question.created_at >= since,
        )
        return int(self.session.execute(stmt).scalar_one())

    def create(self, *, user_id: str, title: str, details: str | None) -> Question:
        """Insert a new question and return the persisted ORM instance."""
        question = Question(user_id=user_id, title=title, details=details, upvotes=0)
        self.session.add(question)
        self.session.flush()
        return question

    def increment_upvotes(self, question_id: int) -> int | None:
        """Atomically add one vote and return the stored value.

        Returns None when the question does not exist.
        """
        stmt = (
            update(Question)
            .where(Question.id == question_id)
            .values(upvotes=Question.upvotes + 1)
            .returning(Question.upvotes)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def decrement_upvotes(self, question_id: int) -> int | None:
        """Atomically remove one vote, never going below zero, and return the stored value."""
        stmt = (
            update(Question)
            .where(Question.id == question_id)
            .values(
                upvotes=case(
                    (Question.upvotes > 0, Question.upvotes - 1),
                    else_=0,
                )
            )
            .returning(Question.upvotes)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def recount_upvotes(self, question_id: int) -> int | None:
        """Rewrite the counter from the ledger in one statement and return it."""
        ledger_size = (
            select(func.count())
            .select_from(QuestionUpvote)
            .where(QuestionUpvote.question_id == question_id)
            .scalar_subquery()
        )
        stmt = (
            update(Question)
            .where(Question.id == question_id)
            .values(upvotes=ledger_size)
            .returning(Question.upvotes)
        )
        return self.session.execute(stmt).scalar_one_or_none()
