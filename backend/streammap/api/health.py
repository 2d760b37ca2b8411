"""Health check endpoints"""

import logging
from fastapi import APIRouter, status
from datetime import datetime
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from streammap.database import AsyncSessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def basic_health_check():
    """
    Basic health check endpoint (no authentication required)

    Returns simple health status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@router.get("/api/v1/health", status_code=status.HTTP_200_OK)
async def detailed_health_check():
    """
    Detailed health check with database status (no authentication required)

    Returns overall status and individual service statuses
    """
    services = {}
    overall_status = "healthy"

    try:
        async with AsyncSessionLocal() as db:
            result = await db.execute(text("SELECT 1"))
            result.scalar_one()
        services["database"] = "connected"
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        services["database"] = f"disconnected: {str(e)}"
        overall_status = "degraded"

    return {
        "status": overall_status,
        "version": "1.0.0",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "services": services
    }
