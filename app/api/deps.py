"""API dependency helpers and service providers."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app import db
from app.core.config import get_settings
from app.db import get_async_session
from app.infra.unit_of_work import SqlAlchemyUnitOfWork
from app.services.health import HealthService
from app.services.users import UserService

__all__ = [
    "get_async_session",
    "get_user_service",
    "get_health_service",
]


# --- Service providers for DI ---


def _uow_factory() -> SqlAlchemyUnitOfWork:
    # Resolved per call so a reconfigured engine (tests, reload) is picked up
    return SqlAlchemyUnitOfWork(db.SessionLocal)


def get_user_service() -> UserService:
    settings = get_settings()
    return UserService(
        _uow_factory,
        viewers_monotonic=settings.viewers_monotonic,
        timeout=settings.db_timeout,
    )


def get_health_service(
    session: AsyncSession = Depends(get_async_session),
) -> HealthService:
    return HealthService(session)
