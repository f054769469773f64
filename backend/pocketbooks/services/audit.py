"""Audit trail helpers. Entries are added to the caller's session and
committed with the change they describe."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.models.audit_log import AuditLog


def create_audit_log(
    db: AsyncSession,
    action: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    description: Optional[str] = None,
    old_value: Optional[Any] = None,
    new_value: Optional[Any] = None,
) -> AuditLog:
    log = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        description=description,
        old_value=old_value,
        new_value=new_value,
    )
    db.add(log)
    return log


def snapshot(obj, fields) -> dict:
    """JSON-safe copy of ``fields`` of ``obj`` for old_value / new_value."""
    data = {}
    for field in fields:
        value = getattr(obj, field, None)
        if isinstance(value, Decimal):
            value = float(value)
        elif isinstance(value, (datetime, date)):
            value = value.isoformat()
        data[field] = value
    return data
