import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from novelverse.config import settings
from novelverse.database.session import get_db
from novelverse.schemas.health import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheckResponse)
def health_check(db: Session = Depends(get_db)) -> HealthCheckResponse:
    """Health check endpoint - DB 연결까지 확인"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database query failed: {e}")
        return HealthCheckResponse(
            status="degraded",
            environment=settings.ENVIRONMENT,
            database="unavailable",
            error=type(e).__name__,
        )
    return HealthCheckResponse(environment=settings.ENVIRONMENT)
