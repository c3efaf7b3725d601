"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import ApiModel


class CommentCreate(ApiModel):
    """Schema for submitting a comment on a question."""

    subject_id: int = Field(..., description="Question the comment belongs to")
    user_id: str | None = Field(None, description="Must match the session user when given")
    content: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(ApiModel):
    """Full comment row as returned by the API and carried in change events."""

    id: int
    question_id: int
    user_id: str
    content: str
    created_at: datetime
    is_admin_comment: bool
    is_pinned: bool


class CommentCreated(ApiModel):
    """Envelope returned after a comment is stored."""

    message: str = "Comment submitted successfully!"
    comment: CommentResponse
