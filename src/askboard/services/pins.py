"""Pin authority: the only writer of a comment's pin flag."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from askboard.models.comment import Comment
from askboard.repositories.comment_repo import CommentRepository
from askboard.repositories.profile_repo import ProfileRepository
from askboard.services.errors import Forbidden, NotFound, StorageFailure, Unauthorized
from askboard.services.notifier import ChangeNotifier, get_notifier
from askboard.services.roles import is_privileged

logger = logging.getLogger(__name__)


class PinAuthority:
    """Gate and write comment pin state.

    Callers pass the desired value rather than a toggle, so repeated or
    simultaneous requests settle on the last write.
    """

    def __init__(self, db: Session, notifier: ChangeNotifier | None = None) -> None:
        self.db = db
        self.comments = CommentRepository(db)
        self.profiles = ProfileRepository(db)
        self.notifier = notifier or get_notifier()

    def set_pinned(
        self,
        comment_id: int,
        pinned: bool,
        acting_user_id: str | None,
        *,
        question_id: int | None = None,
    ) -> Comment:
        """Set ``comment_id``'s pin flag to ``pinned`` on behalf of ``acting_user_id``.

        Raises:
            Unauthorized: If no acting user is given.
            Forbidden: If the acting user's role is not privileged.
            NotFound: If the comment is missing or not on ``question_id``.
            StorageFailure: If the database fails.
        """
        if not acting_user_id:
            raise Unauthorized("Authentication required to pin comments")

        try:
            role = self.profiles.get_role(acting_user_id)
            if not is_privileged(role):
                raise Forbidden("You do not have permission to pin comments")

            comment = self.comments.get_by_id(comment_id)
            if comment is None or (question_id is not None and comment.question_id != question_id):
                raise NotFound(f"Comment {comment_id} not found")

            self.comments.set_pinned(comment, pinned)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Pin update failed for comment %s: %s", comment_id, exc, exc_info=True)
            raise StorageFailure("Failed to update pin state") from exc

        logger.info(
            "Comment %s %s by %s (%s)",
            comment_id,
            "pinned" if pinned else "unpinned",
            acting_user_id,
            role,
        )
        self.notifier.publish_comment("update", comment)
        return comment
