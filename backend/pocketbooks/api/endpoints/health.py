"""Health check - application and database status"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.config import settings
from pocketbooks.core.deps import get_db
from pocketbooks.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()

STARTED_AT = time.monotonic()


@router.get("")
async def health_check(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Run ``SELECT 1`` against the database.

    200 with ``healthy`` when it answers, 503 with ``unhealthy`` otherwise.
    """
    application = {
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }
    started = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
        connection_time_ms = round((time.perf_counter() - started) * 1000, 2)
        rows = await db.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name")
        )
        tables = [row[0] for row in rows.all()]
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "timestamp": datetime.utcnow().isoformat(),
                "database": {
                    "connected": False,
                    "status": "disconnected",
                    "message": "Database connection failed",
                },
                "application": {"status": "degraded", **application},
            },
        )

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "database": {
            "connected": True,
            "status": "connected",
            "connection_time_ms": connection_time_ms,
            "tables": tables,
        },
        "application": {
            "status": "running",
            "uptime": round(time.monotonic() - STARTED_AT, 2),
            **application,
        },
    }
