"""Interest payment API"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.models.loan import InterestPayment, LoanAccount
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.loan import (
    InterestPaymentCreate, InterestPaymentResponse, InterestPaymentUpdate,
)
from pocketbooks.services import crud, loans as loan_service
from pocketbooks.services.crud import ListParams

router = APIRouter()


async def _build_interest_payment_response(
    db: AsyncSession, interest_payment: InterestPayment
) -> InterestPaymentResponse:
    loan = await db.get(LoanAccount, interest_payment.loan_account_id)
    return InterestPaymentResponse(
        id=interest_payment.id,
        loan_account_id=interest_payment.loan_account_id,
        bank_name=loan.bank_name if loan else None,
        account_number=loan.account_number if loan else None,
        date=interest_payment.date,
        principal_amount=interest_payment.principal_amount,
        interest_amount=interest_payment.interest_amount,
        total_amount=interest_payment.total_amount,
        payment_method=interest_payment.payment_method,
        notes=interest_payment.notes,
        expense_id=interest_payment.expense_id,
        payment_id=interest_payment.payment_id,
        created_at=interest_payment.created_at,
        updated_at=interest_payment.updated_at,
    )


@router.get("", response_model=PaginatedResponse[InterestPaymentResponse])
async def list_interest_payments(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    loan_account_id: Optional[int] = Query(None),
) -> Any:
    filters = [InterestPayment.loan_account_id == loan_account_id] if loan_account_id is not None else []
    payments, pagination = await crud.get_all(
        db, InterestPayment, params, ("notes",), filters=filters, default_sort="date"
    )
    return PaginatedResponse[InterestPaymentResponse](
        data=[await _build_interest_payment_response(db, p) for p in payments],
        pagination=pagination,
    )


@router.get("/{interest_payment_id}", response_model=ApiResponse[InterestPaymentResponse])
async def get_interest_payment(
    *,
    db: AsyncSession = Depends(get_db),
    interest_payment_id: int,
) -> Any:
    interest_payment = await crud.get_by_id(db, InterestPayment, interest_payment_id)
    return ApiResponse[InterestPaymentResponse](
        data=await _build_interest_payment_response(db, interest_payment)
    )


@router.post("", response_model=ApiResponse[InterestPaymentResponse], status_code=201)
async def create_interest_payment(
    *,
    db: AsyncSession = Depends(get_db),
    payment_in: InterestPaymentCreate,
) -> Any:
    interest_payment = await loan_service.create_interest_payment(db, payment_in)
    await db.commit()
    return ApiResponse[InterestPaymentResponse](
        data=await _build_interest_payment_response(db, interest_payment),
        message="Interest payment recorded successfully",
    )


@router.put("/{interest_payment_id}", response_model=ApiResponse[InterestPaymentResponse])
async def update_interest_payment(
    *,
    db: AsyncSession = Depends(get_db),
    interest_payment_id: int,
    payment_in: InterestPaymentUpdate,
) -> Any:
    interest_payment = await loan_service.update_interest_payment(db, interest_payment_id, payment_in)
    await db.commit()
    return ApiResponse[InterestPaymentResponse](
        data=await _build_interest_payment_response(db, interest_payment),
        message="Interest payment updated successfully",
    )


@router.delete("/{interest_payment_id}", response_model=ApiResponse)
async def delete_interest_payment(
    *,
    db: AsyncSession = Depends(get_db),
    interest_payment_id: int,
) -> Any:
    await loan_service.delete_interest_payment(db, interest_payment_id)
    await db.commit()
    return ApiResponse(message="Interest payment deleted successfully")
