"""pubwon REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pubwon.api.deps import (
    dispose_engine,
    get_digest_runner,
    get_newsletter_runner,
    get_scan_runner,
    init_session_factory,
)
from pubwon.api.errors import register_error_handlers
from pubwon.api.middleware.request_id import RequestIDMiddleware
from pubwon.api.routers import (
    blog,
    cron,
    github_issues,
    pain_points,
    profile,
    repositories,
    subscriptions,
)
from pubwon.core.logging import setup_logging
from pubwon.scheduler import create_scheduler, scheduler_enabled


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init DB, optionally start the engine loops. Shutdown: dispose engine."""
    factory = init_session_factory()
    scheduler = None
    if scheduler_enabled():
        scheduler = create_scheduler(
            factory,
            scan_runner=get_scan_runner(),
            digest_runner=get_digest_runner(),
            newsletter_runner=get_newsletter_runner(),
        )
        await scheduler.start()
    yield
    if scheduler is not None:
        await scheduler.stop()
    await dispose_engine()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="pubwon",
        docs_url="/api/v1/docs",
        openapi_url="/api/v1/openapi.json",
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    cors_origins = os.environ.get("PUBWON_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(profile.router, prefix="/api/v1/profile", tags=["profile"])
    app.include_router(
        repositories.router, prefix="/api/v1/repositories", tags=["repositories"]
    )
    app.include_router(pain_points.router, prefix="/api/v1/pain-points", tags=["pain-points"])
    app.include_router(github_issues.router, prefix="/api/v1/github", tags=["github"])
    app.include_router(blog.router, prefix="/api/v1/blog", tags=["blog"])
    app.include_router(blog.feed_router, prefix="/api/v1", tags=["blog"])
    app.include_router(subscriptions.router, prefix="/api/v1", tags=["subscriptions"])
    app.include_router(cron.router, prefix="/api/v1/cron", tags=["cron"])

    return app
