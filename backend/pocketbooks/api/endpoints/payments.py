"""Payment API"""

from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.models.payment import Payment
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.payment import PaymentCreate, PaymentResponse, PaymentStats, PaymentUpdate
from pocketbooks.services import crud, payments as payment_service
from pocketbooks.services.crud import ListParams

router = APIRouter()


async def build_payment_responses(db: AsyncSession, payments) -> List[PaymentResponse]:
    """Payment responses with the client / vendor name filled in."""
    names = await payment_service.party_names(db, payments)
    responses = []
    for payment in payments:
        response = PaymentResponse.model_validate(payment)
        response.party_name = names.get((payment.party_type, payment.party_id))
        responses.append(response)
    return responses


@router.get("/stats", response_model=ApiResponse[PaymentStats])
async def get_payment_stats(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    return ApiResponse[PaymentStats](data=await payment_service.get_stats(db))


@router.get("", response_model=PaginatedResponse[PaymentResponse])
async def list_payments(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    transaction_type: Optional[str] = Query(None),
    party_type: Optional[str] = Query(None),
    party_id: Optional[int] = Query(None),
    sale_id: Optional[int] = Query(None),
    asset_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> Any:
    filters = []
    if transaction_type:
        filters.append(Payment.transaction_type == transaction_type)
    if party_type:
        filters.append(Payment.party_type == party_type)
    if party_id is not None:
        filters.append(Payment.party_id == party_id)
    if sale_id is not None:
        filters.append(Payment.sale_id == sale_id)
    if asset_id is not None:
        filters.append(Payment.asset_id == asset_id)
    if start_date:
        filters.append(Payment.payment_date >= start_date)
    if end_date:
        filters.append(Payment.payment_date <= end_date)

    payments, pagination = await crud.get_all(
        db, Payment, params, ("notes", "transaction_id"), filters=filters, default_sort="payment_date"
    )
    return PaginatedResponse[PaymentResponse](
        data=await build_payment_responses(db, payments),
        pagination=pagination,
    )


@router.get("/{payment_id}", response_model=ApiResponse[PaymentResponse])
async def get_payment(
    *,
    db: AsyncSession = Depends(get_db),
    payment_id: int,
) -> Any:
    payment = await crud.get_by_id(db, Payment, payment_id)
    responses = await build_payment_responses(db, [payment])
    return ApiResponse[PaymentResponse](data=responses[0])


@router.post("", response_model=ApiResponse[PaymentResponse], status_code=201)
async def create_payment(
    *,
    db: AsyncSession = Depends(get_db),
    payment_in: PaymentCreate,
) -> Any:
    payment = await payment_service.create_payment(db, payment_in)
    await db.commit()
    responses = await build_payment_responses(db, [payment])
    return ApiResponse[PaymentResponse](data=responses[0], message="Payment recorded successfully")


@router.put("/{payment_id}", response_model=ApiResponse[PaymentResponse])
async def update_payment(
    *,
    db: AsyncSession = Depends(get_db),
    payment_id: int,
    payment_in: PaymentUpdate,
) -> Any:
    payment = await payment_service.update_payment(db, payment_id, payment_in)
    await db.commit()
    responses = await build_payment_responses(db, [payment])
    return ApiResponse[PaymentResponse](data=responses[0], message="Payment updated successfully")


@router.delete("/{payment_id}", response_model=ApiResponse)
async def delete_payment(
    *,
    db: AsyncSession = Depends(get_db),
    payment_id: int,
) -> Any:
    await payment_service.delete_payment(db, payment_id)
    await db.commit()
    return ApiResponse(message="Payment deleted successfully")
