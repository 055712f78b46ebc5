"""
Pagesmith FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend import config
from backend.routes import sessions as session_routes
from backend.services.session_registry import session_registry

logging.basicConfig(
    level=config.settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Sessions are in-memory only; they are dropped on shutdown.
    """
    logger.info("Pagesmith started (%s)", config.settings.ENVIRONMENT)

    yield

    logger.info("Dropping %d editing sessions", len(session_registry))
    session_registry.clear()


app = FastAPI(
    title="Pagesmith",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(session_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
