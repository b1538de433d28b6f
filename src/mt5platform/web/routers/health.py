from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from mt5platform.errors import StoreUnavailableError
from mt5platform.web.deps import AppDep

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    store: str
    timestamp: datetime


@router.get(
    "/health",
    summary="Health check",
    description="Report whether the key-value store is reachable.",
    operation_id="healthCheck",
    response_model=HealthResponse,
    responses={500: {"description": "Store unreachable"}},
)
async def health_check(app: AppDep) -> HealthResponse | JSONResponse:
    try:
        timestamp = await app.check_store()
    except StoreUnavailableError:
        return JSONResponse(status_code=500, content={"status": "unhealthy", "store": "disconnected"})
    return HealthResponse(status="healthy", store="connected", timestamp=timestamp)
