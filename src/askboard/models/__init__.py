"""SQLAlchemy models for the askboard application."""

from .comment import Comment
from .profile import Profile
from .question import Question
from .vote import QuestionUpvote

__all__ = [
    "Comment",
    "Profile",
    "Question",
    "QuestionUpvote",
]
