"""Health check endpoint for load balancers and orchestrators."""

from typing import Annotated, Literal

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from storefront.container import Container
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    success: bool = True
    status: Literal["healthy", "degraded"]
    version: str
    environment: str
    database: Literal["healthy", "unhealthy"]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": True,
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "production",
                    "database": "healthy",
                }
            ]
        }
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="Reports application status and database connectivity.",
)
@inject
async def health_check(
    database: Annotated[Database, Depends(Provide[Container.database])],
    settings: Annotated[Settings, Depends(Provide[Container.config])],
) -> HealthResponse:
    """Always answers 200; a failing database shows up as ``degraded``."""
    db_healthy = await database.health_check()

    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=settings.app_version,
        environment=settings.app_env,
        database="healthy" if db_healthy else "unhealthy",
    )
