"""Domain errors raised by askboard services.

The API layer maps each class to an HTTP status; services never build HTTP
responses themselves.
"""

from __future__ import annotations


class AskboardError(RuntimeError):
    """Base class for all domain failures."""

    code = "Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class Unauthorized(AskboardError):
    """No valid session accompanies the request."""

    code = "Unauthorized"


class Forbidden(AskboardError):
    """The caller is authenticated but lacks the required role."""

    code = "Forbidden"


class NotFound(AskboardError):
    """The referenced question or comment does not exist."""

    code = "NotFound"


class Conflict(AskboardError):
    """The caller's belief about its vote state disagrees with the ledger.

    Carries the unchanged durable count so clients can reconcile their view.
    """

    code = "Conflict"

    def __init__(self, message: str | None = None, *, vote_count: int | None = None) -> None:
        super().__init__(message)
        self.vote_count = vote_count


class AlreadyVoted(Conflict):
    """A vote was requested but the ledger already holds one."""

    code = "AlreadyVoted"


class NotVoted(Conflict):
    """A retraction was requested but the ledger holds no vote."""

    code = "NotVoted"


class RateLimited(AskboardError):
    """The caller exhausted an externally defined quota."""

    code = "RateLimited"


class StorageFailure(AskboardError):
    """The backing store rejected or failed an operation."""

    code = "StorageFailure"


__all__ = [
    "AlreadyVoted",
    "AskboardError",
    "Conflict",
    "Forbidden",
    "NotFound",
    "NotVoted",
    "RateLimited",
    "StorageFailure",
    "Unauthorized",
]
