"""Business logic services for the askboard application."""

from .comment_ordering import CommentThread, order_comments
from .comments import CommentService
from .notifier import ChangeNotifier, get_notifier
from .pins import PinAuthority
from .questions import QuestionService
from .roles import is_privileged
from .votes import VoteToggleService

__all__ = [
    "ChangeNotifier",
    "CommentService",
    "CommentThread",
    "PinAuthority",
    "QuestionService",
    "VoteToggleService",
    "get_notifier",
    "is_privileged",
    "order_comments",
]
