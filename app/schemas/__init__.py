from .common import ErrorResponse, OkResponse, StatusResponse
from .user import UserCreateRequest, UserUpdateRequest

__all__ = [
    "ErrorResponse",
    "OkResponse",
    "StatusResponse",
    "UserCreateRequest",
    "UserUpdateRequest",
]
