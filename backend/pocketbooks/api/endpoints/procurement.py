"""Procurement API - raw material and trading good purchases"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.api.endpoints.payments import build_payment_responses
from pocketbooks.core.deps import get_db
from pocketbooks.models.procurement import Procurement
from pocketbooks.models.vendor import Vendor
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.payment import PaymentResponse
from pocketbooks.schemas.procurement import (
    ProcurementCreate, ProcurementPaymentCreate, ProcurementResponse, ProcurementStats,
    ProcurementUpdate,
)
from pocketbooks.services import crud, procurement as procurement_service
from pocketbooks.services.crud import ListParams

router = APIRouter()


async def _build_procurement_response(db: AsyncSession, procurement: Procurement) -> ProcurementResponse:
    vendor = await db.get(Vendor, procurement.vendor_id)
    return ProcurementResponse(
        id=procurement.id,
        procurement_type=procurement.procurement_type,
        vendor_id=procurement.vendor_id,
        vendor_name=vendor.name if vendor else None,
        procurement_date=procurement.procurement_date,
        items=[
            {
                "id": item.id,
                "item_id": item.item_id,
                "item_name": item.item_name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "amount": item.amount,
            }
            for item in procurement.items
        ],
        total_amount=procurement.total_amount,
        gst_percentage=procurement.gst_percentage,
        gst_amount=procurement.gst_amount,
        grand_total=procurement.grand_total,
        total_paid=procurement.total_paid,
        remaining_amount=procurement.remaining_amount,
        payment_status=procurement.payment_status,
        status=procurement.status,
        invoice_number=procurement.invoice_number,
        notes=procurement.notes,
        payment_terms=procurement.payment_terms,
        received_date=procurement.received_date,
        expected_delivery_date=procurement.expected_delivery_date,
        actual_delivery_date=procurement.actual_delivery_date,
        created_at=procurement.created_at,
        updated_at=procurement.updated_at,
    )


@router.get("/stats", response_model=ApiResponse[ProcurementStats])
async def get_procurement_stats(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    stats = await procurement_service.get_stats(db)
    return ApiResponse[ProcurementStats](data=stats)


@router.get("/{procurement_type}", response_model=PaginatedResponse[ProcurementResponse])
async def list_procurements(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_type: str,
    params: ListParams = Depends(),
    vendor_id: Optional[int] = Query(None),
    payment_status: Optional[str] = Query(None),
) -> Any:
    ptype = procurement_service.resolve_type(procurement_type)
    filters = [Procurement.procurement_type == ptype]
    if vendor_id is not None:
        filters.append(Procurement.vendor_id == vendor_id)
    if payment_status:
        filters.append(Procurement.payment_status == payment_status)

    procurements, pagination = await crud.get_all(
        db, Procurement, params, ("invoice_number", "notes"), filters=filters
    )
    return PaginatedResponse[ProcurementResponse](
        data=[await _build_procurement_response(db, p) for p in procurements],
        pagination=pagination,
    )


@router.post("/{procurement_type}", response_model=ApiResponse[ProcurementResponse], status_code=201)
async def create_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_type: str,
    procurement_in: ProcurementCreate,
) -> Any:
    ptype = procurement_service.resolve_type(procurement_type)
    procurement = await procurement_service.create_procurement(db, ptype, procurement_in)
    await db.commit()
    return ApiResponse[ProcurementResponse](
        data=await _build_procurement_response(db, procurement),
        message="Procurement created successfully",
    )


@router.get("/{procurement_type}/{procurement_id}", response_model=ApiResponse[ProcurementResponse])
async def get_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_type: str,
    procurement_id: int,
) -> Any:
    ptype = procurement_service.resolve_type(procurement_type)
    procurement = await procurement_service.get_procurement(db, ptype, procurement_id)
    return ApiResponse[ProcurementResponse](data=await _build_procurement_response(db, procurement))


@router.put("/{procurement_type}/{procurement_id}", response_model=ApiResponse[ProcurementResponse])
async def update_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_type: str,
    procurement_id: int,
    procurement_in: ProcurementUpdate,
) -> Any:
    ptype = procurement_service.resolve_type(procurement_type)
    procurement = await procurement_service.update_procurement(db, ptype, procurement_id, procurement_in)
    await db.commit()
    return ApiResponse[ProcurementResponse](
        data=await _build_procurement_response(db, procurement),
        message="Procurement updated successfully",
    )


@router.delete("/{procurement_type}/{procurement_id}", response_model=ApiResponse)
async def delete_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_type: str,
    procurement_id: int,
) -> Any:
    ptype = procurement_service.resolve_type(procurement_type)
    await procurement_service.delete_procurement(db, ptype, procurement_id)
    await db.commit()
    return ApiResponse(message="Procurement deleted successfully")


@router.get("/{procurement_type}/{procurement_id}/payments", response_model=ApiResponse[List[PaymentResponse]])
async def list_procurement_payments(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_type: str,
    procurement_id: int,
) -> Any:
    ptype = procurement_service.resolve_type(procurement_type)
    payments = await procurement_service.list_payments(db, ptype, procurement_id)
    return ApiResponse[List[PaymentResponse]](data=await build_payment_responses(db, payments))


@router.post(
    "/{procurement_type}/{procurement_id}/payments",
    response_model=ApiResponse[PaymentResponse],
    status_code=201,
)
async def add_procurement_payment(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_type: str,
    procurement_id: int,
    payment_in: ProcurementPaymentCreate,
) -> Any:
    ptype = procurement_service.resolve_type(procurement_type)
    payment = await procurement_service.add_payment(db, ptype, procurement_id, payment_in)
    await db.commit()
    responses = await build_payment_responses(db, [payment])
    return ApiResponse[PaymentResponse](data=responses[0], message="Payment recorded successfully")
