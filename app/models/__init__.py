# Import models here so Alembic autogenerate sees the full metadata.
# app/models/__init__.py
from .base import Base
from .user import User

__all__ = [
    "Base",
    "User",
]
