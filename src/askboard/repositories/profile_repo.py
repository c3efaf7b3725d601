"""Data access helpers for user profiles."""
from __future__ import annotations

from sqlalchemy.orm import Session

from askboard.models.profile import ROLE_USER, Profile

__all__ = ["ProfileRepository"]


class ProfileRepository:
    """Read-only access to profiles provisioned by the identity service."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> Profile | None:
        """Return the profile for ``user_id`` if one exists."""
        return self.session.get(Profile, user_id)

    def get_role(self, user_id: str) -> str:
        """Return the user's role, defaulting to ``user`` when unknown."""
        profile = self.get(user_id)
        if profile is None or not profile.role:
            return ROLE_USER
        return profile.role
