"""Display ordering for comment threads.

The order is a pure function of the comment rows: pinned comments first, then
oldest first, with the comment id settling equal timestamps. Because nothing
else feeds into it, re-sorting after every change event gives the same
sequence as a fresh fetch.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, TypeVar

from askboard.db.time import as_utc
from askboard.schemas.comment import CommentResponse
from askboard.schemas.events import ChangeEvent


class OrderableComment(Protocol):
    id: int
    created_at: datetime
    is_pinned: bool


C = TypeVar("C", bound=OrderableComment)


def comment_sort_key(comment: OrderableComment) -> tuple[int, datetime, int]:
    """Return the sort key: pinned first, then created_at, then id."""
    return (0 if comment.is_pinned else 1, as_utc(comment.created_at), comment.id)


def order_comments(comments: Iterable[C]) -> list[C]:
    """Return ``comments`` in display order."""
    return sorted(comments, key=comment_sort_key)


class CommentThread:
    """Observer-side copy of one question's comments.

    Rows are stored by id with last-value-wins semantics, so a missed or
    repeated event is corrected by the next one for the same comment.
    """

    def __init__(self, question_id: int, comments: Iterable[CommentResponse] = ()) -> None:
        self.question_id = question_id
        self._rows: dict[int, CommentResponse] = {}
        self.replace(comments)

    def replace(self, comments: Iterable[CommentResponse]) -> None:
        """Reset the view from a full fetch."""
        self._rows = {c.id: c for c in comments if c.question_id == self.question_id}

    def apply(self, event: ChangeEvent) -> bool:
        """Fold a change event into the view; False if it does not concern it."""
        if event.table != "comments" or event.comment is None:
            return False
        if event.question_id != self.question_id:
            return False

        if event.kind == "delete":
            self._rows.pop(event.comment.id, None)
        else:
            self._rows[event.comment.id] = event.comment
        return True

    def ordered(self) -> list[CommentResponse]:
        """Return the comments in display order."""
        return order_comments(self._rows.values())

    def __len__(self) -> int:
        return len(self._rows)
