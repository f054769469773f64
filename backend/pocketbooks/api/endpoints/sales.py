"""Sales API"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.api.endpoints.payments import build_payment_responses
from pocketbooks.core.deps import get_db
from pocketbooks.models.client import Client
from pocketbooks.models.sale import Sale
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.payment import PaymentResponse
from pocketbooks.schemas.sale import (
    SaleCreate, SalePaymentCreate, SaleResponse, SaleStats, SaleStatusResponse, SaleStatusUpdate,
    SaleUpdate,
)
from pocketbooks.services import crud, sales as sale_service
from pocketbooks.services.crud import ListParams

router = APIRouter()


async def _build_sale_response(db: AsyncSession, sale: Sale) -> SaleResponse:
    client = await db.get(Client, sale.client_id)
    return SaleResponse(
        id=sale.id,
        client_id=sale.client_id,
        client_name=client.name if client else None,
        sale_date=sale.sale_date,
        invoice_number=sale.invoice_number,
        items=[
            {
                "id": item.id,
                "item_id": item.item_id,
                "item_type": item.item_type,
                "item_name": item.item_name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total": item.total,
            }
            for item in sale.items
        ],
        subtotal=sale.subtotal,
        discount=sale.discount,
        gst_percentage=sale.gst_percentage,
        gst_amount=sale.gst_amount,
        grand_total=sale.grand_total,
        total_paid=sale.total_paid,
        remaining_amount=sale.remaining_amount,
        payment_status=sale.payment_status,
        status=sale.status,
        payment_terms=sale.payment_terms,
        expected_delivery_date=sale.expected_delivery_date,
        actual_delivery_date=sale.actual_delivery_date,
        notes=sale.notes,
        created_at=sale.created_at,
        updated_at=sale.updated_at,
    )


def _build_status_response(sale: Sale) -> SaleStatusResponse:
    return SaleStatusResponse(
        id=sale.id,
        invoice_number=sale.invoice_number,
        status=sale.status,
        payment_status=sale.payment_status,
        grand_total=sale.grand_total,
        total_paid=sale.total_paid,
        remaining_amount=sale.remaining_amount,
    )


@router.get("/stats", response_model=ApiResponse[SaleStats])
async def get_sale_stats(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    return ApiResponse[SaleStats](data=await sale_service.get_stats(db))


@router.get("", response_model=PaginatedResponse[SaleResponse])
async def list_sales(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    client_id: Optional[int] = Query(None),
    payment_status: Optional[str] = Query(None),
) -> Any:
    filters = []
    if client_id is not None:
        filters.append(Sale.client_id == client_id)
    if payment_status:
        filters.append(Sale.payment_status == payment_status)

    sales, pagination = await crud.get_all(db, Sale, params, ("invoice_number", "notes"), filters=filters)
    return PaginatedResponse[SaleResponse](
        data=[await _build_sale_response(db, s) for s in sales],
        pagination=pagination,
    )


@router.get("/{sale_id}", response_model=ApiResponse[SaleResponse])
async def get_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
) -> Any:
    sale = await sale_service.get_sale(db, sale_id)
    return ApiResponse[SaleResponse](data=await _build_sale_response(db, sale))


@router.post("", response_model=ApiResponse[SaleResponse], status_code=201)
async def create_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_in: SaleCreate,
) -> Any:
    sale = await sale_service.create_sale(db, sale_in)
    await db.commit()
    return ApiResponse[SaleResponse](
        data=await _build_sale_response(db, sale),
        message="Sale created successfully",
    )


@router.put("/{sale_id}", response_model=ApiResponse[SaleResponse])
async def update_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
    sale_in: SaleUpdate,
) -> Any:
    sale = await sale_service.update_sale(db, sale_id, sale_in)
    await db.commit()
    return ApiResponse[SaleResponse](
        data=await _build_sale_response(db, sale),
        message="Sale updated successfully",
    )


@router.delete("/{sale_id}", response_model=ApiResponse)
async def delete_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
) -> Any:
    await sale_service.delete_sale(db, sale_id)
    await db.commit()
    return ApiResponse(message="Sale deleted successfully")


@router.get("/{sale_id}/status", response_model=ApiResponse[SaleStatusResponse])
async def get_sale_status(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
) -> Any:
    sale = await sale_service.get_sale(db, sale_id)
    return ApiResponse[SaleStatusResponse](data=_build_status_response(sale))


@router.put("/{sale_id}/status", response_model=ApiResponse[SaleStatusResponse])
async def update_sale_status(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
    status_in: SaleStatusUpdate,
) -> Any:
    sale = await sale_service.change_status(db, sale_id, status_in.status)
    await db.commit()
    return ApiResponse[SaleStatusResponse](
        data=_build_status_response(sale),
        message=f"Sale status is {sale.status}",
    )


@router.get("/{sale_id}/payments", response_model=ApiResponse[List[PaymentResponse]])
async def list_sale_payments(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
) -> Any:
    payments = await sale_service.list_payments(db, sale_id)
    return ApiResponse[List[PaymentResponse]](data=await build_payment_responses(db, payments))


@router.post("/{sale_id}/payments", response_model=ApiResponse[PaymentResponse], status_code=201)
async def add_sale_payment(
    *,
    db: AsyncSession = Depends(get_db),
    sale_id: int,
    payment_in: SalePaymentCreate,
) -> Any:
    payment = await sale_service.add_payment(db, sale_id, payment_in)
    await db.commit()
    responses = await build_payment_responses(db, [payment])
    return ApiResponse[PaymentResponse](data=responses[0], message="Payment recorded successfully")
