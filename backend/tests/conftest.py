"""
Pytest configuration and fixtures for Pagesmith backend tests.
"""

from __future__ import annotations

import os

import httpx
import pytest
import pytest_asyncio

# Set test environment variables before importing config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from backend.main import app  # noqa: E402
from backend.services.session_registry import session_registry  # noqa: E402


@pytest_asyncio.fixture(loop_scope="session")
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture(autouse=True)
def clean_registry():
    """Each test starts with no live sessions."""
    session_registry.clear()
    yield
    session_registry.clear()


@pytest_asyncio.fixture(loop_scope="session")
async def session_id(async_client):
    """Create a session on the basic template and return its id."""
    res = await async_client.post("/api/sessions", json={})
    assert res.status_code == 201
    return res.json()["session_id"]
