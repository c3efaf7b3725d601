"""Question submission and listing."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from askboard.core.settings import settings
from askboard.db.time import start_of_utc_day
from askboard.models.question import Question
from askboard.repositories.profile_repo import ProfileRepository
from askboard.repositories.question_repo import QuestionRepository
from askboard.services.errors import NotFound, RateLimited, StorageFailure, Unauthorized
from askboard.services.roles import is_privileged

logger = logging.getLogger(__name__)


class QuestionService:
    """Asks and lists questions, honoring the daily question cap."""

    def __init__(self, db: Session, daily_limit: int | None = None) -> None:
        self.db = db
        self.questions = QuestionRepository(db)
        self.profiles = ProfileRepository(db)
        self.daily_limit = settings.daily_question_limit if daily_limit is None else daily_limit

    def ask(self, user_id: str | None, title: str, details: str | None) -> Question:
        """Create a question for ``user_id``.

        Privileged roles are exempt from the daily cap; a non-positive cap
        disables it.
        """
        if not user_id:
            raise Unauthorized("Authentication required to ask a question")

        try:
            role = self.profiles.get_role(user_id)
            if self.daily_limit > 0 and not is_privileged(role):
                asked_today = self.questions.count_asked_since(user_id, start_of_utc_day())
                if asked_today >= self.daily_limit:
                    raise RateLimited(
                        f"Daily limit of {self.daily_limit} questions reached"
                    )
            question = self.questions.create(user_id=user_id, title=title, details=details)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Question insert failed for %s: %s", user_id, exc, exc_info=True)
            raise StorageFailure("Failed to store question") from exc
        return question

    def get(self, question_id: int) -> Question:
        try:
            question = self.questions.get_by_id(question_id)
        except SQLAlchemyError as exc:
            logger.error("Question fetch failed for %s: %s", question_id, exc, exc_info=True)
            raise StorageFailure("Failed to load question") from exc
        if question is None:
            raise NotFound(f"Question {question_id} not found")
        return question

    def list_recent(self, limit: int = 50) -> list[Question]:
        try:
            return self.questions.list_recent(limit)
        except SQLAlchemyError as exc:
            logger.error("Question listing failed: %s", exc, exc_info=True)
            raise StorageFailure("Failed to load questions") from exc

    def list_for_user(self, user_id: str, limit: int = 50) -> list[Question]:
        try:
            return self.questions.list_for_user(user_id, limit)
        except SQLAlchemyError as exc:
            logger.error("Question listing failed for %s: %s", user_id, exc, exc_info=True)
            raise StorageFailure("Failed to load questions") from exc
