"""Expense API"""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.models.expense import Expense
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseStats, ExpenseUpdate
from pocketbooks.services import crud, expenses as expense_service
from pocketbooks.services.crud import ListParams

router = APIRouter()


@router.get("/stats", response_model=ApiResponse[ExpenseStats])
async def get_expense_stats(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    return ApiResponse[ExpenseStats](data=await expense_service.get_stats(db))


@router.get("", response_model=PaginatedResponse[ExpenseResponse])
async def list_expenses(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    category: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> Any:
    filters = []
    if category:
        filters.append(Expense.category == category)
    if start_date:
        filters.append(Expense.date >= start_date)
    if end_date:
        filters.append(Expense.date <= end_date)

    expenses, pagination = await crud.get_all(
        db, Expense, params, ("description", "receipt_number", "notes"), filters=filters, default_sort="date"
    )
    return PaginatedResponse[ExpenseResponse](
        data=[ExpenseResponse.model_validate(e) for e in expenses],
        pagination=pagination,
    )


@router.get("/{expense_id}", response_model=ApiResponse[ExpenseResponse])
async def get_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_id: int,
) -> Any:
    expense = await crud.get_by_id(db, Expense, expense_id)
    return ApiResponse[ExpenseResponse](data=ExpenseResponse.model_validate(expense))


@router.post("", response_model=ApiResponse[ExpenseResponse], status_code=201)
async def create_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_in: ExpenseCreate,
) -> Any:
    expense = await expense_service.create_expense(db, expense_in.model_dump())
    await db.commit()
    return ApiResponse[ExpenseResponse](
        data=ExpenseResponse.model_validate(expense),
        message="Expense created successfully",
    )


@router.put("/{expense_id}", response_model=ApiResponse[ExpenseResponse])
async def update_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_id: int,
    expense_in: ExpenseUpdate,
) -> Any:
    expense = await expense_service.update_expense(db, expense_id, expense_in.model_dump(exclude_unset=True))
    await db.commit()
    return ApiResponse[ExpenseResponse](
        data=ExpenseResponse.model_validate(expense),
        message="Expense updated successfully",
    )


@router.delete("/{expense_id}", response_model=ApiResponse)
async def delete_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_id: int,
) -> Any:
    await expense_service.delete_expense(db, expense_id)
    await db.commit()
    return ApiResponse(message="Expense deleted successfully")
