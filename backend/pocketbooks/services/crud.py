"""
Generic CRUD helpers shared by every resource router.

- ListParams: page / limit / search / status / sort query parameters
- get_all: filtered, sorted, paginated list
- get_by_id / create / update / delete with 404 and uniqueness (409) checks
"""

import math
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type

from fastapi import HTTPException, Query
from sqlalchemy import and_, func, or_, select, Numeric
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.config import settings
from pocketbooks.core.logging_config import get_logger
from pocketbooks.db.base import Base
from pocketbooks.schemas.common import Pagination
from pocketbooks.services.calculations import to_decimal

logger = get_logger(__name__)


class ListParams:
    """Query parameters accepted by every list endpoint"""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
        search: Optional[str] = Query(None, description="Case-insensitive substring search"),
        status: Optional[str] = Query(None),
        sort_by: Optional[str] = Query(None),
        sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    ):
        self.page = page
        self.limit = limit
        self.search = search.strip() if search else None
        self.status = status
        self.sort_by = sort_by
        self.sort_order = sort_order


def model_label(model: Type[Base]) -> str:
    """RawMaterial -> 'Raw material'"""
    return re.sub(r"(?<!^)(?=[A-Z])", " ", model.__name__).capitalize()


def _like_term(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _column(model: Type[Base], name: str):
    if name not in model.__table__.columns:
        return None
    return getattr(model, name)


def coerce_numeric(model: Type[Base], data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert floats bound for DECIMAL columns to Decimal."""
    columns = model.__table__.columns
    for key, value in data.items():
        if key in columns and isinstance(columns[key].type, Numeric) and value is not None:
            data[key] = to_decimal(value)
    return data


def drop_required_nulls(model: Type[Base], data: Dict[str, Any]) -> Dict[str, Any]:
    """Remove explicit nulls aimed at NOT NULL columns from an update payload."""
    columns = model.__table__.columns
    return {
        key: value for key, value in data.items()
        if value is not None or key not in columns or columns[key].nullable
    }


async def get_all(
    db: AsyncSession,
    model: Type[Base],
    params: ListParams,
    search_fields: Sequence[str] = (),
    filters: Iterable = (),
    default_sort: str = "created_at",
    options: Sequence = (),
) -> Tuple[List[Any], Pagination]:
    query = select(model)
    conditions = list(filters)

    if params.search and search_fields:
        term = _like_term(params.search)
        conditions.append(
            or_(*[getattr(model, field).ilike(term, escape="\\") for field in search_fields])
        )
    if params.status and _column(model, "status") is not None:
        conditions.append(model.status == params.status)

    if conditions:
        query = query.where(and_(*conditions))

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    sort_field = params.sort_by or default_sort
    column = _column(model, sort_field)
    if column is None:
        raise HTTPException(status_code=400, detail=f"Invalid sort field: {sort_field}")
    order = column.asc() if params.sort_order == "asc" else column.desc()
    query = query.order_by(order, model.id.desc() if params.sort_order == "desc" else model.id.asc())
    query = query.offset((params.page - 1) * params.limit).limit(params.limit)
    if options:
        query = query.options(*options)

    rows = (await db.execute(query)).scalars().all()
    pagination = Pagination(
        page=params.page,
        limit=params.limit,
        total=total,
        total_pages=math.ceil(total / params.limit) if total else 0,
    )
    return list(rows), pagination


async def get_by_id(db: AsyncSession, model: Type[Base], id: int, options: Sequence = ()):
    """Fresh copy of the row (relationships reloaded) or 404."""
    query = select(model).where(model.id == id).execution_options(populate_existing=True)
    if options:
        query = query.options(*options)
    result = await db.execute(query)
    obj = result.scalar_one_or_none()
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{model_label(model)} not found")
    return obj


async def ensure_unique(
    db: AsyncSession,
    model: Type[Base],
    field: str,
    value: Any,
    exclude_id: Optional[int] = None,
) -> None:
    if value is None:
        return
    query = select(model.id).where(getattr(model, field) == value)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    if (await db.execute(query.limit(1))).first() is not None:
        logger.info(f"Duplicate {model.__tablename__}.{field}: {value}")
        raise HTTPException(status_code=409, detail=f"{field} already exists")


async def create(
    db: AsyncSession,
    model: Type[Base],
    data: Dict[str, Any],
    unique_field: Optional[str] = None,
):
    if unique_field:
        await ensure_unique(db, model, unique_field, data.get(unique_field))
    obj = model(**coerce_numeric(model, data))
    db.add(obj)
    await db.flush()
    return obj


async def update(
    db: AsyncSession,
    model: Type[Base],
    id: int,
    data: Dict[str, Any],
    unique_field: Optional[str] = None,
):
    """Apply only the fields present in ``data``; nulls for required columns are ignored."""
    obj = await get_by_id(db, model, id)
    if unique_field and data.get(unique_field) is not None and data[unique_field] != getattr(obj, unique_field):
        await ensure_unique(db, model, unique_field, data[unique_field], exclude_id=id)
    for field, value in coerce_numeric(model, drop_required_nulls(model, data)).items():
        setattr(obj, field, value)
    await db.flush()
    return obj


async def delete(db: AsyncSession, model: Type[Base], id: int):
    obj = await get_by_id(db, model, id)
    await db.delete(obj)
    await db.flush()
    return obj


async def count_where(db: AsyncSession, model: Type[Base], *conditions) -> int:
    result = await db.execute(select(func.count(model.id)).where(*conditions))
    return result.scalar() or 0
