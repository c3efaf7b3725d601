"""Vote toggling that keeps question counters equal to the upvote ledger."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from askboard.repositories.profile_repo import ProfileRepository
from askboard.repositories.question_repo import QuestionRepository
from askboard.repositories.vote_repo import VoteLedger
from askboard.services.errors import (
    AlreadyVoted,
    Conflict,
    NotFound,
    NotVoted,
    StorageFailure,
    Unauthorized,
)
from askboard.services.notifier import ChangeNotifier, get_notifier

logger = logging.getLogger(__name__)


class VoteToggleService:
    """Mutates the ledger and the counter of a question as one unit.

    Both writes happen in one transaction. The ledger write decides whether
    the counter moves: a duplicate insert or an empty delete leaves the
    counter untouched and is reported as a conflict. Counter updates are
    single atomic statements, and the value handed back is the one the
    database returned, not a local computation.
    """

    def __init__(self, db: Session, notifier: ChangeNotifier | None = None) -> None:
        self.db = db
        self.questions = QuestionRepository(db)
        self.ledger = VoteLedger(db)
        self.profiles = ProfileRepository(db)
        self.notifier = notifier or get_notifier()

    def toggle(self, question_id: int, user_id: str | None, believed_voted: bool) -> int:
        """Cast or retract ``user_id``'s vote on ``question_id``.

        Args:
            question_id: Question being voted on.
            user_id: Authenticated caller.
            believed_voted: True if the caller thinks it has already voted and
                wants to retract; False to cast a vote.

        Returns:
            The question's vote count as stored after the change.

        Raises:
            Unauthorized: If no caller is given or the caller has no profile.
            NotFound: If the question does not exist.
            AlreadyVoted: If casting but the ledger already has the vote.
            NotVoted: If retracting but the ledger has no vote.
            StorageFailure: If the database fails; nothing is committed.
        """
        if not user_id:
            raise Unauthorized("Authentication required to vote")

        try:
            if self.profiles.get(user_id) is None:
                raise Unauthorized(f"Unknown user {user_id}")
            if not self.questions.exists(question_id):
                raise NotFound(f"Question {question_id} not found")

            if believed_voted:
                if not self.ledger.delete(user_id, question_id):
                    raise NotVoted(
                        "No vote to remove",
                        vote_count=self.questions.get_upvotes(question_id),
                    )
                new_count = self.questions.decrement_upvotes(question_id)
            else:
                if not self.ledger.insert_if_absent(user_id, question_id):
                    raise AlreadyVoted(
                        "Already upvoted",
                        vote_count=self.questions.get_upvotes(question_id),
                    )
                new_count = self.questions.increment_upvotes(question_id)

            if new_count is None:
                # The question vanished between the existence check and the update.
                self.db.rollback()
                raise NotFound(f"Question {question_id} not found")

            self.db.commit()
        except Conflict:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(
                "Vote toggle failed for question %s (retract=%s): %s",
                question_id,
                believed_voted,
                exc,
                exc_info=True,
            )
            raise StorageFailure("Failed to update vote") from exc

        logger.info(
            "Question %s vote %s, count now %s",
            question_id,
            "retracted" if believed_voted else "cast",
            new_count,
        )
        self.notifier.publish_vote_count(question_id, new_count)
        return new_count

    def has_voted(self, question_id: int, user_id: str) -> bool:
        """Return True if ``user_id`` currently has a vote on ``question_id``."""
        try:
            if not self.questions.exists(question_id):
                raise NotFound(f"Question {question_id} not found")
            return self.ledger.has_voted(user_id, question_id)
        except SQLAlchemyError as exc:
            logger.error("Vote lookup failed for question %s: %s", question_id, exc, exc_info=True)
            raise StorageFailure("Failed to read vote state") from exc

    def current_count(self, question_id: int) -> int:
        """Return the stored vote count for ``question_id``."""
        try:
            count = self.questions.get_upvotes(question_id)
        except SQLAlchemyError as exc:
            logger.error("Counter read failed for question %s: %s", question_id, exc, exc_info=True)
            raise StorageFailure("Failed to read vote count") from exc
        if count is None:
            raise NotFound(f"Question {question_id} not found")
        return count

    def reconcile(self, question_id: int) -> int:
        """Rewrite the counter to the ledger's cardinality and return it.

        Repairs drift left by writers that bypassed this service.
        """
        try:
            new_count = self.questions.recount_upvotes(question_id)
            if new_count is None:
                self.db.rollback()
                raise NotFound(f"Question {question_id} not found")
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Vote reconcile failed for question %s: %s", question_id, exc, exc_info=True)
            raise StorageFailure("Failed to reconcile vote count") from exc

        self.notifier.publish_vote_count(question_id, new_count)
        return new_count
