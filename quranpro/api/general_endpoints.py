"""
General API endpoints for the Quran Pro API
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from quranpro.auth.deps import get_database
from quranpro.config.settings import settings
from quranpro.config.logger import logger
from quranpro.database import DatabaseError, DatabaseManager

router = APIRouter(tags=["general"])


@router.get("/")
def root():
    """API root endpoint"""
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.VERSION,
        "status": "healthy"
    }


@router.get("/api/health")
def health_check(db: DatabaseManager = Depends(get_database)):
    """Health check endpoint; pings the database"""
    try:
        db.ping()
        database = "connected"
    except DatabaseError as e:
        logger.warning("health_db_unreachable", extra={"error": str(e)})
        database = "disconnected"

    return {
        "status": "OK" if database == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "database": database,
    }
