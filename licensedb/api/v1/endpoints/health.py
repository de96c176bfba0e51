"""Health check API endpoints."""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from licensedb.core.config import settings
from licensedb.core.database import db_client

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="healthy, or degraded when the database is not usable")
    version: str = Field(..., description="Running application version")
    service: str = Field(..., description="Service name")
    database: str = Field(..., description="Database connectivity status")
    latency_ms: Optional[float] = Field(None, description="Database round trip time")
    missing_tables: list[str] = Field(
        default_factory=list, description="Tables the service needs that do not exist"
    )


@router.get(
    "",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check that the service runs and the obligation tables are reachable",
    operation_id="get_service_health_status",
)
async def health_check() -> HealthCheckResponse:
    db_health = await db_client.health_check()

    return HealthCheckResponse(
        status="healthy" if db_health["status"] == "healthy" else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        database=db_health["status"],
        latency_ms=db_health.get("latency_ms"),
        missing_tables=db_health.get("missing_tables", []),
    )
