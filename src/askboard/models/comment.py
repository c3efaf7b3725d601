"""SQLAlchemy model for question comments."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from askboard.db.session import Base
from askboard.db.time import utcnow


class Comment(Base):
    """Comment attached to a question."""

    __tablename__ = "comment"
    __table_args__ = (Index("ix_comment_question_id", "question_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("question.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(Text, ForeignKey("profile.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    # Fixed at insert time from the author's role; never rewritten.
    is_admin_comment: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Written only through PinAuthority.
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
