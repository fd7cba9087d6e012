"""Health check endpoint — used by the hosting platform's service monitor."""

from fastapi import APIRouter
from pydantic import BaseModel

from app.database import check_db_connection
from app.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    success: bool
    message: str
    environment: str
    database: str
    version: str = "1.0.0"


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
def health_check() -> HealthResponse:
    """
    Returns 200 while the process is up; `database` reports whether the
    DB answered a trivial query.
    """
    db_ok = check_db_connection()
    return HealthResponse(
        success=True,
        message="Menu Catalog API is running" if db_ok else "Menu Catalog API is degraded",
        environment=settings.environment,
        database="connected" if db_ok else "unreachable",
    )
