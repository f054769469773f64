"""Audit log API (read only)"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.models.audit_log import AuditLog
from pocketbooks.schemas.audit_log import AuditLogResponse
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.services import crud
from pocketbooks.services.crud import ListParams

router = APIRouter()


@router.get("", response_model=PaginatedResponse[AuditLogResponse])
async def list_audit_logs(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    action: Optional[str] = Query(None),
    entity_type: Optional[str] = Query(None),
    entity_id: Optional[int] = Query(None),
) -> Any:
    filters = []
    if action:
        filters.append(AuditLog.action == action)
    if entity_type:
        filters.append(AuditLog.entity_type == entity_type)
    if entity_id is not None:
        filters.append(AuditLog.entity_id == entity_id)

    logs, pagination = await crud.get_all(db, AuditLog, params, ("description",), filters=filters)
    return PaginatedResponse[AuditLogResponse](
        data=[AuditLogResponse.model_validate(log) for log in logs],
        pagination=pagination,
    )


@router.get("/{log_id}", response_model=ApiResponse[AuditLogResponse])
async def get_audit_log(
    *,
    db: AsyncSession = Depends(get_db),
    log_id: int,
) -> Any:
    log = await crud.get_by_id(db, AuditLog, log_id)
    return ApiResponse[AuditLogResponse](data=AuditLogResponse.model_validate(log))
