"""
Health check endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger

router = APIRouter()


@router.get("/health/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Readiness probe - checks the database answers"""
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except Exception as e:
        logger.log_error_with_context(e, context="readiness check")
        database = "unhealthy"

    ready = database == "healthy"
    return {
        "success": ready,
        "status": "ready" if ready else "not_ready",
        "checks": {"database": database},
        "environment": settings.ENVIRONMENT,
    }
