"""System endpoints: liveness ping and database health check."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlmodel import Session

from bus_system import __version__
from bus_system.database import get_db_session, is_healthy

router = APIRouter(tags=["System"])


class PingResponse(BaseModel):
    ping: str = "pong"
    version: str = __version__


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str
    database: dict[str, str]


@router.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    """Liveness probe; touches neither the database nor the event bus."""
    return PingResponse()


@router.get("/health-check", response_model=HealthCheckResponse)
def health_check(session: Session = Depends(get_db_session)) -> JSONResponse:
    """Report whether the database is reachable.

    Returns 200 when healthy and 503 otherwise.
    """
    database = is_healthy(session)
    healthy = database["status"] == "healthy"
    body = HealthCheckResponse(status="healthy" if healthy else "unhealthy", database=database)
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )
