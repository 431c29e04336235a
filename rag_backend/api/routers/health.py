"""
Liveness and readiness probes.

GET /health answers without touching dependencies; GET /health/db does a
``SELECT 1`` round trip and answers 503 when the database is unreachable.

Dependencies: rag_backend.boundary.db
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from rag_backend.boundary.db import ping_database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    message: str


@router.get("", response_model=HealthStatus)
async def liveness() -> HealthStatus:
    return HealthStatus(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthStatus)
async def readiness() -> HealthStatus:
    """Verify the chunk store is reachable."""
    try:
        await ping_database()
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database ping failed: {type(e).__name__}", extra={"error_msg": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        ) from e
    return HealthStatus(status="healthy", message="Database connection OK")
