import uuid
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

from httpx import ASGITransport, AsyncClient
from pytest import fixture, mark

from app.main import app
from app.managers.rate_limiter import limiter


@fixture
async def client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing FastAPI endpoints."""
    limiter.enabled = True
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        app.state.limiter = limiter
        yield ac


@mark.asyncio
async def test_root_endpoint(client: AsyncClient) -> None:
    """Test root endpoint."""
    response = await client.get("/", headers={"X-API-Key": str(uuid.uuid4())})
    assert response.status_code == 200
    assert "message" in response.json()


@mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == app.version
    assert data["services"] == {"database": "connected", "storage": "local"}


@mark.asyncio
async def test_health_check_degraded(client: AsyncClient) -> None:
    with patch("app.main.ping_db", AsyncMock(return_value=False)):
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["services"]["database"] == "unavailable"


@mark.asyncio
async def test_security_headers(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert float(response.headers["X-Process-Time"]) >= 0


@mark.asyncio
async def test_metrics_rate_limit(client: AsyncClient) -> None:
    unique_key = str(uuid.uuid4())
    headers = {"X-API-Key": unique_key}

    # Hit the endpoint 5 times (allowed)
    for _ in range(5):
        response = await client.get("/metrics", headers=headers)
        assert response.status_code == 200
        assert "api_metrics" in response.json()

    # The 6th request should be rate limited
    response = await client.get("/metrics", headers=headers)
    assert response.status_code == 429
    assert "Rate limit exceeded" in response.text
