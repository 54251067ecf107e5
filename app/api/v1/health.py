"""Health check endpoint with optional database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import AppSettings
from app.core.config import API_VERSION
from app.core.database import check_db_connected, get_db
from app.schemas.envelope import Envelope, success_response
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=Envelope[HealthResponse])
def get_health(settings: AppSettings, db: Annotated[Session, Depends(get_db)]) -> Envelope:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    health = HealthResponse(
        status="ok",
        version=API_VERSION,
        environment=settings.APP_ENV,
        database=db_status,
    )
    return success_response(health, "Service is healthy")
