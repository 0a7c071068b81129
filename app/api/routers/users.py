"""/users routers that delegate to UserService via DI."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_user_service
from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.dto import UserDTO, UserPageDTO
from app.schemas.common import ErrorResponse, StatusResponse
from app.schemas.user import UserCreateRequest, UserUpdateRequest
from app.services.users import UserService
from app.utils.paging import page_to_offset

router = APIRouter(prefix="/users", tags=["users"])

_LIST_DESC = (
    "Lists users one page at a time.\n"
    "- sort omitted or empty: insertion order (id ASC)\n"
    "- sort=asc: rating ASC, id ASC\n"
    "- sort=desc: rating DESC, id ASC\n"
    "Any other sort value is rejected with 400."
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserDTO,
    summary="Create a user",
    responses={
        400: {"model": ErrorResponse, "description": "invalid input"},
        409: {"model": ErrorResponse, "description": "nickname already exists"},
    },
)
async def create_user(
    payload: UserCreateRequest,
    svc: UserService = Depends(get_user_service),
):
    return await svc.create(
        name=payload.name,
        nickname=payload.nickname,
        likes=payload.likes,
        viewers=payload.viewers,
    )


@router.get(
    "",
    response_model=UserPageDTO,
    summary="List users (optionally sorted by rating)",
    description=_LIST_DESC,
    responses={400: {"model": ErrorResponse, "description": "invalid sort or paging"}},
)
async def list_users(
    sort: str = Query("", description="'', 'asc' or 'desc'"),
    page: int = Query(1, description="1-based page number"),
    page_size: int | None = Query(None, description="Users per page"),
    svc: UserService = Depends(get_user_service),
):
    settings = get_settings()
    size = settings.default_page_size if page_size is None else page_size
    if size > settings.max_page_size:
        raise ValidationError(f"page_size cannot exceed {settings.max_page_size}")
    return await svc.list(sort=sort, limit=size, offset=page_to_offset(page, size))


@router.get(
    "/{nickname}",
    response_model=UserDTO,
    summary="Get a user by nickname",
    responses={404: {"model": ErrorResponse, "description": "user not found"}},
)
async def get_user(
    nickname: str,
    svc: UserService = Depends(get_user_service),
):
    return await svc.get(nickname)


@router.patch(
    "/{nickname}",
    response_model=StatusResponse,
    summary="Partially update a user",
    description="Only the keys present in the body are changed; an empty body is rejected.",
    responses={
        400: {"model": ErrorResponse, "description": "invalid input"},
        404: {"model": ErrorResponse, "description": "user not found"},
        409: {"model": ErrorResponse, "description": "nickname already exists"},
    },
)
async def update_user(
    nickname: str,
    payload: UserUpdateRequest,
    svc: UserService = Depends(get_user_service),
):
    await svc.update(nickname, payload.to_patch())
    return StatusResponse()


@router.delete(
    "/{nickname}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user by nickname",
    responses={404: {"model": ErrorResponse, "description": "user not found"}},
)
async def delete_user(
    nickname: str,
    svc: UserService = Depends(get_user_service),
):
    await svc.delete(nickname)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
