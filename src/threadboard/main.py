# src/threadboard/main.py
"""Main entry point for the Threadboard application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from threadboard.api.v1 import (
    auth_router,
    bookmarks_router,
    discussions_router,
    helpful_router,
    notifications_router,
    realtime_router,
    replies_router,
    users_router,
)
from threadboard.core.errors import ForumError
from threadboard.core.logging import configure_logging
from threadboard.core.settings import settings
from threadboard.db.session import create_tables
from threadboard.services.mailer import get_email_client

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Threadboard API",
    description="Threaded discussion forum with helpful marks and notifications",
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
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(discussions_router, prefix="/api/v1")
app.include_router(replies_router, prefix="/api/v1")
app.include_router(helpful_router, prefix="/api/v1")
app.include_router(bookmarks_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(realtime_router, prefix="/api/v1")


@app.exception_handler(ForumError)
async def forum_error_handler(_request: Request, exc: ForumError) -> JSONResponse:
    """Render domain errors the same way FastAPI renders ``HTTPException``."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    if settings.auto_create_tables:
        create_tables()
    if not settings.email_enabled:
        logger.warning("SENDGRID_API_KEY is not set. Email notifications will not be sent.")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_email_client().close()


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
        "description": "Threaded discussion forum API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("threadboard.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
