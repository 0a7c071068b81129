# app/schemas/common.py
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    detail: str = Field(description="Error message")

    model_config = {"json_schema_extra": {"examples": [{"detail": "user not found"}]}}


class OkResponse(BaseModel):
    ok: bool = Field(description="Always true when the probe succeeds")

    model_config = {"json_schema_extra": {"examples": [{"ok": True}]}}


class StatusResponse(BaseModel):
    status: str = Field(default="ok", description="Success marker")

    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}
