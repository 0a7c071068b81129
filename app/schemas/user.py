from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.services.users import UserPatch

# Bodies only enforce JSON types, in strict mode: "10", true and 12.0 are not
# counters. Emptiness, sign and likes <= viewers are domain rules and are
# reported by UserService as 400, not as 422 here.


class UserCreateRequest(BaseModel):
    name: str = Field(description="Display name (non-empty)")
    nickname: str = Field(description="Unique handle (non-empty)")
    likes: int = Field(default=0, description="Like counter (>= 0, <= viewers)")
    viewers: int = Field(default=0, description="Viewer counter (>= 0)")

    model_config = ConfigDict(
        extra="forbid",
        strict=True,
        json_schema_extra={
            "examples": [{"name": "Ann", "nickname": "ann1", "likes": 3, "viewers": 10}]
        },
    )


class UserUpdateRequest(BaseModel):
    """Sparse update body; omitted keys are left untouched."""

    name: str | None = Field(default=None, description="New display name")
    nickname: str | None = Field(default=None, description="New unique handle")
    likes: int | None = Field(default=None, description="New like counter")
    viewers: int | None = Field(default=None, description="New viewer counter")

    model_config = ConfigDict(
        extra="forbid",
        strict=True,
        json_schema_extra={"examples": [{"likes": 5}, {"name": "Ann B.", "viewers": 20}]},
    )

    def to_patch(self) -> UserPatch:
        # model_fields_set tells "omitted" apart from an explicit null
        return UserPatch.from_mapping(self.model_dump(include=self.model_fields_set))
