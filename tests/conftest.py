# tests/conftest.py
import os

# アプリ import 前に環境を固定する（get_settings は lru_cache）
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "test"
os.environ["SENTRY_DSN"] = ""
os.environ["LOG_FORMAT"] = "json"
os.environ.pop("ALLOW_ORIGINS", None)
os.environ.pop("VIEWERS_MONOTONIC", None)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api import deps  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.infra.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models import Base  # noqa: E402
from app.services.users import UserService  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ==== Engine / Schema ====
@pytest_asyncio.fixture
async def engine():
    # StaticPool: every session shares the single in-memory database
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s
        if s.in_transaction():
            await s.rollback()


@pytest.fixture
def uow_factory(session_factory):
    return lambda: SqlAlchemyUnitOfWork(session_factory)


@pytest.fixture
def user_service(uow_factory):
    return UserService(uow_factory, viewers_monotonic=True, timeout=5.0)


@pytest_asyncio.fixture
async def app_client(session_factory, uow_factory):
    app = create_app()

    def override_user_service():
        settings = get_settings()
        return UserService(
            uow_factory,
            viewers_monotonic=settings.viewers_monotonic,
            timeout=settings.db_timeout,
        )

    async def override_get_session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[deps.get_user_service] = override_user_service
    app.dependency_overrides[deps.get_async_session] = override_get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
