"""Pin-related Pydantic schemas."""

from .comment import CommentResponse
from .common import ApiModel


class PinRequest(ApiModel):
    """Schema for setting a comment's pin state."""

    comment_id: int
    subject_id: int
    desired_pinned: bool


class PinResult(ApiModel):
    """Schema returned after a pin update."""

    is_pinned: bool
    comment: CommentResponse
