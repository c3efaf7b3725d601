"""Comment submission and thread retrieval."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from askboard.models.comment import Comment
from askboard.repositories.comment_repo import CommentRepository
from askboard.repositories.profile_repo import ProfileRepository
from askboard.repositories.question_repo import QuestionRepository
from askboard.services.comment_ordering import order_comments
from askboard.services.errors import NotFound, StorageFailure, Unauthorized
from askboard.services.notifier import ChangeNotifier, get_notifier
from askboard.services.roles import is_privileged

logger = logging.getLogger(__name__)


class CommentService:
    """Creates comments and serves ordered threads."""

    def __init__(self, db: Session, notifier: ChangeNotifier | None = None) -> None:
        self.db = db
        self.comments = CommentRepository(db)
        self.profiles = ProfileRepository(db)
        self.questions = QuestionRepository(db)
        self.notifier = notifier or get_notifier()

    def create(self, question_id: int, author_id: str | None, content: str) -> Comment:
        """Store a comment; the admin badge is fixed from the author's current role."""
        if not author_id:
            raise Unauthorized("Authentication required to comment")

        try:
            if not self.questions.exists(question_id):
                raise NotFound(f"Question {question_id} not found")
            is_admin_comment = is_privileged(self.profiles.get_role(author_id))
            comment = self.comments.create(
                question_id=question_id,
                user_id=author_id,
                content=content,
                is_admin_comment=is_admin_comment,
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Comment insert failed on question %s: %s", question_id, exc, exc_info=True)
            raise StorageFailure("Failed to store comment") from exc

        self.notifier.publish_comment("insert", comment)
        return comment

    def list_ordered(self, question_id: int) -> list[Comment]:
        """Return the question's comments in display order."""
        try:
            if not self.questions.exists(question_id):
                raise NotFound(f"Question {question_id} not found")
            comments = self.comments.list_for_question(question_id)
        except SQLAlchemyError as exc:
            logger.error("Comment fetch failed on question %s: %s", question_id, exc, exc_info=True)
            raise StorageFailure("Failed to load comments") from exc
        return order_comments(comments)
