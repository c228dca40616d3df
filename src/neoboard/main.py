# src/neoboard/main.py
"""Main entry point for the NeoBoard API server."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from neoboard.api.endpoints import (
    auth_router,
    boards_router,
    posts_router,
    system_router,
    threads_router,
)
from neoboard.api.errors import register_exception_handlers
from neoboard.core.logging import configure_logging
from neoboard.core.settings import settings
from neoboard.db.session import init_database

logger = logging.getLogger(__name__)

configure_logging(settings.log_level)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Message board API: boards, threads, replies and anonymous posting",
    version=settings.app_version,
    debug=settings.debug,
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

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith(settings.api_prefix):
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
    return response


# Include API routers
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(boards_router, prefix=settings.api_prefix)
app.include_router(threads_router, prefix=settings.api_prefix)
app.include_router(posts_router, prefix=settings.api_prefix)
app.include_router(system_router, prefix=settings.api_prefix)


@app.on_event("startup")
async def on_startup() -> None:
    # A database failure propagates and aborts startup.
    init_database()
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)


@app.get("/")
async def root() -> dict[str, object]:
    """Root endpoint with basic information about the API."""
    prefix = settings.api_prefix
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "status": "running",
        "endpoints": {
            "auth": f"{prefix}/auth",
            "boards": f"{prefix}/boards",
            "threads": f"{prefix}/threads",
            "posts": f"{prefix}/posts",
            "health": f"{prefix}/health",
        },
        "docs": "/docs",
    }


def run() -> None:
    """Serve the API with uvicorn (``neoboard-server``)."""
    import uvicorn

    uvicorn.run(
        "neoboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
