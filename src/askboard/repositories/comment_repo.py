"""Data access helpers for comments."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from askboard.models.comment import Comment

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        """Return a comment by identifier."""
        return self.session.get(Comment, comment_id)

    def list_for_question(self, question_id: int) -> list[Comment]:
        """Return every comment on ``question_id`` in storage order.

        Display order is decided by :func:`askboard.services.comment_ordering.order_comments`.
        """
        stmt = select(Comment).where(Comment.question_id == question_id).order_by(Comment.id)
        return list(self.session.execute(stmt).scalars())

    def create(
        self,
        *,
        question_id: int,
        user_id: str,
        content: str,
        is_admin_comment: bool,
    ) -> Comment:
        """Insert a new comment and return the persisted ORM instance."""
        comment = Comment(
            question_id=question_id,
            user_id=user_id,
            content=content,
            is_admin_comment=is_admin_comment,
            is_pinned=False,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def set_pinned(self, comment: Comment, pinned: bool) -> Comment:
        """Write the pin flag; a no-op when it already holds ``pinned``."""
        comment.is_pinned = pinned
        self.session.flush()
        return comment
