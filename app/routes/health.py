"""
Health check endpoints.
Used for monitoring and deployment readiness checks.
"""

from fastapi import APIRouter, HTTPException
from app.config.firebase import get_db
from app.core.settings import settings
from datetime import datetime, timezone


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
async def database_health():
    """
    Database connectivity check.
    Lists the top-level collections (none need to exist yet).
    """
    try:
        db = get_db()
        collections = list(db.collections())

        return {
            "status": "healthy",
            "database": "mock" if settings.USE_MOCK_DB else "firestore",
            "connected": True,
            "collections_count": len(collections),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}"
        )
