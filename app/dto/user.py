"""DTOs for user resources exposed via the public API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserDTO(BaseModel):
    id: int = Field(description="User ID assigned by the store")
    name: str = Field(description="Display name")
    nickname: str = Field(description="Unique handle, used as the lookup key")
    likes: int = Field(description="Like counter (0 <= likes <= viewers)")
    viewers: int = Field(description="Viewer counter")
    rating: float = Field(description="likes / viewers rounded to 3 places, 0 without viewers")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Ann",
                "nickname": "ann1",
                "likes": 3,
                "viewers": 10,
                "rating": 0.3,
            }
        },
    )


class UserPageDTO(BaseModel):
    """One page of users plus the total row count for page metadata."""

    data: list[UserDTO] = Field(description="Users on this page")
    total_count: int = Field(default=0, description="Total number of users")
    limit: int = Field(default=20, description="Page size")
    offset: int = Field(default=0, description="Rows skipped before this page")
    has_more: bool = Field(default=False, description="Whether a next page exists")
