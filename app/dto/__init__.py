"""Public DTO exports for FastAPI response models."""

from .user import UserDTO, UserPageDTO

__all__ = [
    "UserDTO",
    "UserPageDTO",
]
