"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model exchanging camelCase JSON while accepting snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorDetail(ApiModel):
    """Body of the ``detail`` field on error responses."""

    code: str = Field(..., description="Machine-readable error code.")
    message: str
    vote_count: int | None = None
