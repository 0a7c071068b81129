from fastapi import APIRouter, Depends

from app.api.deps import get_health_service
from app.schemas.common import ErrorResponse, OkResponse
from app.services.health import HealthService

router = APIRouter(prefix="/readyz", tags=["health"])


@router.get(
    "",
    response_model=OkResponse,
    summary="Readiness probe",
    description="Runs SELECT 1 against the database; 503 when it cannot be reached.",
    responses={503: {"model": ErrorResponse, "description": "database unavailable"}},
)
async def readyz(svc: HealthService = Depends(get_health_service)):
    return await svc.ok()
