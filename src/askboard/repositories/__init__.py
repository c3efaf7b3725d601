"""Data access helpers over the ORM models."""

from .comment_repo import CommentRepository
from .profile_repo import ProfileRepository
from .question_repo import QuestionRepository
from .vote_repo import VoteLedger

__all__ = ["CommentRepository", "ProfileRepository", "QuestionRepository", "VoteLedger"]
