"""Question-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import ApiModel


class QuestionCreate(ApiModel):
    """Schema for asking a new question."""

    title: str = Field(..., min_length=1, max_length=300)
    details: str | None = Field(None, max_length=10_000)


class QuestionResponse(ApiModel):
    """Schema for question information returned by the API."""

    id: int
    user_id: str
    title: str | None
    details: str | None
    upvotes: int
    created_at: datetime
