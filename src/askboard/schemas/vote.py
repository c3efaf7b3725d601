"""Vote-related Pydantic schemas."""

from pydantic import Field

from .common import ApiModel


class VoteToggle(ApiModel):
    """Schema for toggling the caller's upvote on a question."""

    subject_id: int
    user_id: str | None = Field(None, description="Must match the session user when given")
    believed_currently_voted: bool = Field(
        ...,
        description="True to retract an existing vote, False to cast one",
    )


class VoteResult(ApiModel):
    """Schema returned after a successful toggle."""

    new_vote_count: int


class VoteStatus(ApiModel):
    """The caller's current vote state on a question."""

    subject_id: int
    has_voted: bool
    vote_count: int
