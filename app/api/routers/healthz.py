# app/api/routers/healthz.py
from fastapi import APIRouter

from app.schemas.common import OkResponse

router = APIRouter(prefix="/healthz", tags=["health"])


@router.get(
    "",
    response_model=OkResponse,
    summary="Liveness probe",
    description="Always 200 while the process is up; does not touch the database.",
)
async def healthz():
    return {"ok": True}
