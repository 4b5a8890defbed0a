"""
Health check endpoints.

Used for monitoring and load balancer health checks.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime
import logging
import platform

from sqlalchemy.exc import SQLAlchemyError

from core.infrastructure.database.config import check_database


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns system health status.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": "mesob-marketplace",
        "version": "1.0.0",
        "python_version": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check():
    """
    Readiness check endpoint.

    Returns 503 when the database does not answer `SELECT 1`.
    """
    try:
        await check_database()
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"❌ Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unavailable",
                "timestamp": datetime.utcnow().isoformat(),
                "checks": {"api": "ok", "database": "error"},
            },
        )

    return {
        "status": "ready",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {
            "api": "ok",
            "database": "ok",
        }
    }
