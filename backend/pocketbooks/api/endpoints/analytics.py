"""Analytics API"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.schemas.analytics import DashboardData
from pocketbooks.schemas.common import ApiResponse
from pocketbooks.services import analytics

router = APIRouter()


@router.get("/dashboard", response_model=ApiResponse[DashboardData])
async def get_dashboard(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    return ApiResponse[DashboardData](data=await analytics.get_dashboard(db))
