"""SQLAlchemy model for user profiles mirrored from the identity service."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from askboard.db.session import Base

ROLE_USER = "user"


class Profile(Base):
    """Public profile of an authenticated user.

    Rows are provisioned by the identity service; this application only reads
    them to resolve display data and the user's role.
    """

    __tablename__ = "profile"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    username: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Open set: "user", "admin", "me", "og", ...
    role: Mapped[str] = mapped_column(Text, nullable=False, default=ROLE_USER)
