# src/hublib/main.py
"""Main entry point for the HubLib application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from hublib.api.v1 import (
    admin_router,
    collections_router,
    comments_router,
    groups_router,
    ratings_router,
    resources_router,
    saved_router,
    shares_router,
    suggestions_router,
    users_router,
)
from hublib.core.errors import HubLibError
from hublib.core.logging import configure_logging
from hublib.core.settings import settings

configure_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="HubLib API",
    description="Community resource library with sharing and moderated taxonomy",
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


@app.exception_handler(HubLibError)
async def hublib_error_handler(request: Request, exc: HubLibError) -> JSONResponse:
    """Render service-layer errors as ``{"detail", "code"}`` bodies."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


# Include API routers; saved_router first so "/resources/saved" is not taken as an id.
app.include_router(saved_router, prefix="/api/v1")
app.include_router(resources_router, prefix="/api/v1")
app.include_router(shares_router, prefix="/api/v1")
app.include_router(ratings_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(suggestions_router, prefix="/api/v1")
app.include_router(groups_router, prefix="/api/v1")
app.include_router(collections_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


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
        "description": "Community resource library with sharing and moderated taxonomy",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hublib.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
