"""SQLAlchemy model for questions."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from askboard.db.session import Base
from askboard.db.time import utcnow


class Question(Base):
    """A question posted to the board.

    ``upvotes`` is a denormalized counter of the ``question_upvote`` ledger and
    must only change through the atomic counter helpers in
    :mod:`askboard.repositories.question_repo`.
    """

    __tablename__ = "question"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_question_upvotes_non_negative"),
        Index("ix_question_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(Text, ForeignKey("profile.id"), nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
