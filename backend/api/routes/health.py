"""Health check endpoint."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from api.deps import DbSession
from schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """Return health status of the API including database connectivity."""
    db_status = "connected"
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        db_status = "disconnected"

    return HealthResponse(
        status="healthy" if db_status == "connected" else "degraded",
        version=VERSION,
        database=db_status,
        timestamp=datetime.now(timezone.utc),
    )
