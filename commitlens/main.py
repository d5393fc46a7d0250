"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from commitlens.api import repository, reviews, threads, webhooks
from commitlens.config.settings import settings
from commitlens.services.session import ReviewSession, build_session
from commitlens.utils.logging import setup_observability

# Setup logging and observability
setup_observability()
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(f"Starting CommitLens in {settings.environment} environment")
    if settings.logfire_token:
        logger.info("Logfire observability enabled")

    session = build_session(settings)
    app.state.session = session
    await session.start()

    yield

    logger.info("Shutting down CommitLens")
    await session.stop()


app = FastAPI(
    title="CommitLens",
    description="Commit-by-commit AI code review with line-anchored review threads",
    version=VERSION,
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire if configured
if settings.logfire_token:
    import logfire

    logfire.instrument_fastapi(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(webhooks.router)
app.include_router(repository.router)
app.include_router(reviews.router)
app.include_router(threads.router)


@app.get("/health")
async def health_check(request: Request) -> dict[str, str | bool | int]:
    """Health check endpoint with configuration status."""
    session: ReviewSession | None = getattr(request.app.state, "session", None)
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": VERSION,
        "vcs_backend": settings.vcs_backend,
        "openai_configured": bool(settings.openai_api_key),
        "logfire_enabled": bool(settings.logfire_token),
        "webhook_secret_configured": bool(settings.github_webhook_secret),
        "repository_attached": bool(session and session.watcher.is_attached),
        "active_threads": len(session.registry) if session else 0,
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "message": "CommitLens API",
        "docs": "/docs",
        "health": "/health",
        "repository": "/repository",
        "threads": "/threads",
    }
