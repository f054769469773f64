"""System API - scheduler status and manual backup"""

from typing import Any

from fastapi import APIRouter, HTTPException

from pocketbooks.core.logging_config import get_logger
from pocketbooks.schemas.common import ApiResponse
from pocketbooks.services.scheduler import get_scheduler_status, trigger_backup_now

logger = get_logger(__name__)
router = APIRouter()


@router.get("/scheduler", response_model=ApiResponse)
async def scheduler_status() -> Any:
    return ApiResponse(data=get_scheduler_status())


@router.post("/backup", response_model=ApiResponse, status_code=201)
async def create_backup() -> Any:
    """Copy the database file into the backups directory now."""
    try:
        backup = trigger_backup_now()
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ApiResponse(data=backup, message="Backup created successfully")
