# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.db import build_session_maker, get_session
from app.dependencies import get_media_service
from app.main import app
from app.managers.rate_limiter import limiter
from app.services import MediaService


@pytest.fixture
async def client(
    engine: AsyncEngine,
    mock_storage: MagicMock,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client bound to the test database and image store."""
    maker = build_session_maker(engine)

    async def override_get_session() -> AsyncGenerator[AsyncSession]:
        async with maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_media_service] = lambda: MediaService(storage=mock_storage)
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def post_form() -> dict[str, str]:
    return {
        "title": "Getting Started with FastAPI",
        "meta": "A short tour",
        "content": "FastAPI is a modern web framework",
        "slug": "getting-started",
        "author": "Jane",
        "tags": '["python", "fastapi"]',
        "featured": "false",
    }
