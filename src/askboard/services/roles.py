"""Role capability helpers."""
from __future__ import annotations

from collections.abc import Iterable

from askboard.core.settings import settings


def is_privileged(role: str | None, privileged_roles: Iterable[str] | None = None) -> bool:
    """Return True if ``role`` grants pin permission and question-cap exemption.

    Args:
        role: Role name as stored on the profile; None means a plain user.
        privileged_roles: Override for the configured ``PRIVILEGED_ROLES``.
    """
    if not role:
        return False
    roles = settings.privileged_roles if privileged_roles is None else privileged_roles
    return role.strip().lower() in {r.strip().lower() for r in roles}
