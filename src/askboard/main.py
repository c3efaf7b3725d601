# src/askboard/main.py
"""Main entry point for the askboard application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from askboard.api.v1 import (
    comments_router,
    pins_router,
    questions_router,
    realtime_router,
    votes_router,
)
from askboard.core.settings import settings
from askboard.services.notifier import RedisEventListener, get_notifier

logging.getLogger("askboard").setLevel(settings.log_level.upper())

# Initialize FastAPI app
app = FastAPI(
    title="askboard API",
    description="Community question board with upvotes and pinned comments",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(questions_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(pins_router, prefix="/api/v1")
app.include_router(realtime_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    notifier = get_notifier()
    if notifier.relay is not None:
        listener = RedisEventListener(notifier, notifier.relay)
        await listener.start()
        app.state.event_listener = listener
    else:
        app.state.event_listener = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    listener: RedisEventListener | None = getattr(app.state, "event_listener", None)
    if listener:
        await listener.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("askboard.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
