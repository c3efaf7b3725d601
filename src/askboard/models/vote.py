"""Model for the per-user upvote ledger."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from askboard.db.session import Base
from askboard.db.time import utcnow


class QuestionUpvote(Base):
    """Fact that a user has upvoted a question.

    The ledger is the source of truth for vote membership; the counter on
    :class:`~askboard.models.question.Question` is derived from it.
    """

    __tablename__ = "question_upvote"
    __table_args__ = (Index("ix_question_upvote_question_id", "question_id"),)

    # Composite primary key prevents duplicate votes from the same user.
    user_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("profile.id"),
        primary_key=True,
    )
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("question.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
