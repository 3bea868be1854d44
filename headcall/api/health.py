# Role: Liveness probe. Reports whether the inference engine has its model loaded; never triggers a decode.

from fastapi import APIRouter
from pydantic import BaseModel

from headcall.api import deps

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    loaded: bool
    status: str


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    status = deps.orchestrator.health()
    return HealthResponse(loaded=status.loaded, status=status.status)
