"""Data access helpers for the upvote ledger."""
from __future__ import annotations

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from askboard.db.time import utcnow
from askboard.models.vote import QuestionUpvote

__all__ = ["VoteLedger"]


class VoteLedger:
    """Set of (user, question) "has voted" facts.

    Membership is decided by the table's composite primary key; two racing
    inserts for the same pair resolve inside the database, not here.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def has_voted(self, user_id: str, question_id: int) -> bool:
        """Return True if ``user_id`` has a ledger entry for ``question_id``."""
        stmt = select(QuestionUpvote.user_id).where(
            QuestionUpvote.user_id == user_id,
            QuestionUpvote.question_id == question_id,
        )
        return self.session.execute(stmt).first() is not None

    def count(self, question_id: int) -> int:
        """Return the number of ledger entries for ``question_id``."""
        stmt = select(func.count()).select_from(QuestionUpvote).where(
            QuestionUpvote.question_id == question_id,
        )
        return int(self.session.execute(stmt).scalar_one())

    def insert_if_absent(self, user_id: str, question_id: int) -> bool:
        """Record a vote; return False if the pair already existed."""
        values = {"user_id": user_id, "question_id": question_id, "created_at": utcnow()}
        dialect = self.session.get_bind().dialect.name
        upvote_table = QuestionUpvote.__table__

        if dialect == "postgresql":
            stmt = postgresql.insert(upvote_table).values(**values).on_conflict_do_nothing()
        elif dialect == "sqlite":
            stmt = sqlite.insert(upvote_table).values(**values).on_conflict_do_nothing()
        else:
            return self._insert_in_savepoint(values)

        result = self.session.execute(stmt)
        return result.rowcount == 1

    def _insert_in_savepoint(self, values: dict[str, object]) -> bool:
        # Backends without ON CONFLICT: let the primary key reject the duplicate.
        try:
            with self.session.begin_nested():
                self.session.execute(insert(QuestionUpvote.__table__).values(**values))
        except IntegrityError:
            # Only a primary-key clash means "already voted"; foreign-key and
            # other violations propagate.
            if self.has_voted(str(values["user_id"]), int(values["question_id"])):
                return False
            raise
        return True

    def delete(self, user_id: str, question_id: int) -> bool:
        """Remove a vote; return False if there was nothing to remove."""
        stmt = delete(QuestionUpvote).where(
            QuestionUpvote.user_id == user_id,
            QuestionUpvote.question_id == question_id,
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1
