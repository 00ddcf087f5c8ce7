from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, HTTPException
from google.cloud.firestore import AsyncClient

from ...dependencies import get_db
from ....config import get_settings
from ....repositories.collections import Collections

logger = structlog.get_logger(__name__)
settings = get_settings()

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncClient = Depends(get_db)) -> Dict[str, Any]:
    try:
        async for _ in db.collection(Collections.FEEDS).limit(1).stream():
            break
    except Exception as e:
        logger.error("Firestore health check failed", error=str(e))
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "database": "unhealthy",
                "error": "Firestore connectivity failed",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    return {
        "status": "healthy",
        "service": "Curio API",
        "version": "0.1.0",
        "environment": "development" if settings.debug else "production",
        "database": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
