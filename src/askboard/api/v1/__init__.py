"""Version 1 API endpoints."""

from .endpoints import (
    comments_router,
    pins_router,
    questions_router,
    realtime_router,
    votes_router,
)

__all__ = [
    "comments_router",
    "pins_router",
    "questions_router",
    "realtime_router",
    "votes_router",
]
