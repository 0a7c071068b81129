import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.api import deps
from app.main import create_app


@pytest.mark.asyncio
async def test_healthz_ok(app_client):
    resp = await app_client.get("/healthz")
    assert resp.status_code == 200
    data = resp.json()
    assert data == {"ok": True}


@pytest.mark.asyncio
async def test_readyz_ok(app_client):
    resp = await app_client.get("/readyz")
    assert resp.status_code == 200
    data = resp.json()
    assert data == {"ok": True}


@pytest.mark.asyncio
async def test_health_reports_env(app_client):
    resp = await app_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "env": "test"}


class _DeadSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_readyz_returns_503_when_database_unreachable():
    app = create_app()

    async def _dead_session():
        yield _DeadSession()

    app.dependency_overrides[deps.get_async_session] = _dead_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.get("/readyz")

    assert resp.status_code == 503
    assert resp.json() == {"detail": "database unavailable"}
