# migrations/env.py
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from app.core.config import get_settings
from app.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

_SYNC_PREFIXES = (
    ("postgres://", "postgresql+psycopg://"),
    ("postgresql+asyncpg://", "postgresql+psycopg://"),
    ("postgresql+psycopg2://", "postgresql+psycopg://"),
    ("postgresql://", "postgresql+psycopg://"),
    ("sqlite+aiosqlite://", "sqlite://"),
)


def _get_sqlalchemy_url() -> str:
    # Alembic runs synchronously: swap the async driver for psycopg/pysqlite
    url = get_settings().database_url
    for prefix, replacement in _SYNC_PREFIXES:
        if url.startswith(prefix):
            return replacement + url[len(prefix) :]
    return url


target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=_get_sqlalchemy_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        compare_server_default=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = _get_sqlalchemy_url()
    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
