# app/api/endpoints/health.py
import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.responses import format_response
from app.db.database import database

router = APIRouter()

STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - STARTED_AT, 2)


@router.get("/health")
def health_check():
    """
    Database-aware health check; 503 when the database cannot be reached
    """
    connected = database.check_connection()
    data = {
        "status": "healthy" if connected else "degraded",
        "database": "connected" if connected else "disconnected",
        "uptime": uptime_seconds(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "pool": database.get_stats(),
    }
    if connected:
        return format_response(True, data, "Service is healthy")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=format_response(False, message="Database unavailable", error="DATABASE_UNAVAILABLE", meta=data),
    )
