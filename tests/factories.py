"""Row builders shared by the test modules."""
from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from askboard.core.security import create_access_token
from askboard.models import Comment, Profile, Question


def make_profile(db: Session, role: str = "user", username: str | None = None) -> Profile:
    """Persist a profile with a fresh id."""
    profile = Profile(id=str(uuid.uuid4()), username=username, role=role)
    db.add(profile)
    db.commit()
    return profile


def make_question(db: Session, author: Profile, title: str = "How do I test?") -> Question:
    question = Question(user_id=author.id, title=title, details="Details", upvotes=0)
    db.add(question)
    db.commit()
    return question


def make_comment(
    db: Session,
    question: Question,
    author: Profile,
    *,
    content: str = "A comment",
    created_at: datetime | None = None,
    is_pinned: bool = False,
) -> Comment:
    comment = Comment(
        question_id=question.id,
        user_id=author.id,
        content=content,
        created_at=created_at or datetime.now(UTC),
        is_admin_comment=False,
        is_pinned=is_pinned,
    )
    db.add(comment)
    db.commit()
    return comment


def auth_headers(profile: Profile) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(profile.id)}"}
