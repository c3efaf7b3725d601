"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentCreated, CommentResponse
from .common import ErrorDetail
from .events import ChangeEvent
from .pin import PinRequest, PinResult
from .question import QuestionCreate, QuestionResponse
from .vote import VoteResult, VoteStatus, VoteToggle

__all__ = [
    "ChangeEvent",
    "CommentCreate", "CommentCreated", "CommentResponse",
    "ErrorDetail",
    "PinRequest", "PinResult",
    "QuestionCreate", "QuestionResponse",
    "VoteResult", "VoteStatus", "VoteToggle",
]
