"""API endpoint modules for version 1."""

from .comments import router as comments_router
from .pins import router as pins_router
from .questions import router as questions_router
from .realtime import router as realtime_router
from .votes import router as votes_router

__all__ = [
    "comments_router",
    "pins_router",
    "questions_router",
    "realtime_router",
    "votes_router",
]
