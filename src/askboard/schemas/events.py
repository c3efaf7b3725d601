"""Change events pushed to real-time subscribers."""

from typing import Literal

from pydantic import Field

from .comment import CommentResponse
from .common import ApiModel

EventTable = Literal["questions", "comments"]
EventKind = Literal["insert", "update", "delete"]


class ChangeEvent(ApiModel):
    """A mutation notice for one question's channel.

    Events carry the full new value for the touched key (the counter or the
    complete comment row), so consumers reconcile by key instead of patching.
    """

    question_id: int
    table: EventTable
    kind: EventKind
    vote_count: int | None = Field(None, description="Set for question events")
    comment: CommentResponse | None = Field(None, description="Set for comment events")

    @property
    def key(self) -> tuple[str, int]:
        """Return the (table, row id) pair this event refers to."""
        if self.table == "comments" and self.comment is not None:
            return (self.table, self.comment.id)
        return (self.table, self.question_id)
