"""
Health check endpoints
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from webcalc.core.config import get_settings
from webcalc.core.database import get_db
from webcalc.core.logging_config import LoggingConfig
from webcalc.services.history_service import HistoryService
from webcalc.services.window_store import get_window_store

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint

    Returns:
        dict: Health status
    """
    return {
        "status": "healthy",
        "timestamp": _now(),
        "service": get_settings().app_name
    }


@router.get("/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Detailed health check with component status

    Returns:
        dict: Detailed health status of all components
    """
    settings = get_settings()
    health_status = {
        "status": "healthy",
        "timestamp": _now(),
        "service": settings.app_name,
        "version": "0.1.0",
        "environment": settings.app_env,
        "components": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
            "history_records": HistoryService(db).count(),
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
            "error": type(e).__name__
        }

    health_status["components"]["window_store"] = {
        "status": "healthy",
        "open_windows": len(get_window_store().window_ids()),
    }

    return health_status


@router.get("/health/readiness")
def readiness_check(db: Session = Depends(get_db)):
    """
    Readiness check - is the service ready to accept traffic?

    Returns:
        dict: Readiness status
    """
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "ready",
            "message": "Service is ready to accept traffic",
            "timestamp": _now()
        }
    except Exception as e:
        logger.error(f"Readiness check failed: {e}", exc_info=True)
        return {
            "status": "not_ready",
            "message": f"Service is not ready: {str(e)}",
            "timestamp": _now(),
            "error": type(e).__name__
        }


@router.get("/health/liveness")
async def liveness_check():
    """
    Liveness check - is the service alive?
    """
    return {
        "status": "alive",
        "timestamp": _now()
    }
