"""Asset API - assets and asset procurements"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.asset import Asset, AssetProcurement
from pocketbooks.models.vendor import Vendor
from pocketbooks.schemas.asset import (
    AssetCreate, AssetProcurementCreate, AssetProcurementResponse, AssetProcurementUpdate,
    AssetResponse, AssetStats, AssetUpdate,
)
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.services import assets as asset_service, crud
from pocketbooks.services.crud import ListParams

logger = get_logger(__name__)
router = APIRouter()


async def _vendor_name(db: AsyncSession, vendor_id: Optional[int]) -> Optional[str]:
    if vendor_id is None:
        return None
    vendor = await db.get(Vendor, vendor_id)
    return vendor.name if vendor else None


async def _build_asset_response(db: AsyncSession, asset: Asset) -> AssetResponse:
    response = AssetResponse.model_validate(asset)
    response.vendor_name = await _vendor_name(db, asset.vendor_id)
    return response


async def _build_asset_procurement_response(
    db: AsyncSession, procurement: AssetProcurement
) -> AssetProcurementResponse:
    return AssetProcurementResponse(
        id=procurement.id,
        vendor_id=procurement.vendor_id,
        vendor_name=await _vendor_name(db, procurement.vendor_id),
        procurement_date=procurement.procurement_date,
        items=[
            {
                "id": item.id,
                "asset_name": item.asset_name,
                "description": item.description,
                "category": item.category,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "amount": item.amount,
            }
            for item in procurement.items
        ],
        total_amount=procurement.total_amount,
        gst_amount=procurement.gst_amount,
        grand_total=procurement.grand_total,
        total_paid=procurement.total_paid,
        remaining_amount=procurement.remaining_amount,
        payment_status=procurement.payment_status,
        invoice_number=procurement.invoice_number,
        notes=procurement.notes,
        status=procurement.status,
        asset_ids=await asset_service.asset_ids_for(db, procurement.id),
        created_at=procurement.created_at,
        updated_at=procurement.updated_at,
    )


# ========== Stats and maintenance ==========

@router.get("/stats", response_model=ApiResponse[AssetStats])
async def get_asset_stats(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    return ApiResponse[AssetStats](data=await asset_service.get_stats(db))


@router.post("/recalculate-payments", response_model=ApiResponse)
async def recalculate_asset_payments(
    *,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Re-derive every asset's paid / remaining totals from its payments."""
    result = await asset_service.recalculate_all_asset_payments(db)
    await db.commit()
    return ApiResponse(data=result, message=f"Recalculated {result['updated_count']} asset(s)")


# ========== Asset procurement ==========

@router.get("/procurement", response_model=PaginatedResponse[AssetProcurementResponse])
async def list_asset_procurements(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    vendor_id: Optional[int] = Query(None),
) -> Any:
    filters = [AssetProcurement.vendor_id == vendor_id] if vendor_id is not None else []
    procurements, pagination = await crud.get_all(
        db, AssetProcurement, params, ("invoice_number", "notes"), filters=filters
    )
    return PaginatedResponse[AssetProcurementResponse](
        data=[await _build_asset_procurement_response(db, p) for p in procurements],
        pagination=pagination,
    )


@router.post("/procurement", response_model=ApiResponse[AssetProcurementResponse], status_code=201)
async def create_asset_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_in: AssetProcurementCreate,
) -> Any:
    procurement = await asset_service.create_asset_procurement(db, procurement_in)
    await db.commit()
    logger.info(f"Created asset procurement {procurement.id} ({procurement.grand_total})")
    return ApiResponse[AssetProcurementResponse](
        data=await _build_asset_procurement_response(db, procurement),
        message="Asset procurement created successfully",
    )


@router.get("/procurement/{procurement_id}", response_model=ApiResponse[AssetProcurementResponse])
async def get_asset_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_id: int,
) -> Any:
    procurement = await crud.get_by_id(db, AssetProcurement, procurement_id)
    return ApiResponse[AssetProcurementResponse](data=await _build_asset_procurement_response(db, procurement))


@router.put("/procurement/{procurement_id}", response_model=ApiResponse[AssetProcurementResponse])
async def update_asset_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_id: int,
    procurement_in: AssetProcurementUpdate,
) -> Any:
    procurement = await crud.update(
        db, AssetProcurement, procurement_id, procurement_in.model_dump(exclude_unset=True)
    )
    await db.commit()
    return ApiResponse[AssetProcurementResponse](
        data=await _build_asset_procurement_response(db, procurement),
        message="Asset procurement updated successfully",
    )


@router.delete("/procurement/{procurement_id}", response_model=ApiResponse)
async def delete_asset_procurement(
    *,
    db: AsyncSession = Depends(get_db),
    procurement_id: int,
) -> Any:
    await asset_service.delete_asset_procurement(db, procurement_id)
    await db.commit()
    return ApiResponse(message="Asset procurement deleted successfully")


# ========== Assets ==========

@router.get("", response_model=PaginatedResponse[AssetResponse])
async def list_assets(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    category: Optional[str] = Query(None),
    vendor_id: Optional[int] = Query(None),
) -> Any:
    filters = []
    if category:
        filters.append(Asset.category == category)
    if vendor_id is not None:
        filters.append(Asset.vendor_id == vendor_id)
    assets, pagination = await crud.get_all(
        db, Asset, params, ("name", "category", "location"), filters=filters
    )
    return PaginatedResponse[AssetResponse](
        data=[await _build_asset_response(db, a) for a in assets],
        pagination=pagination,
    )


@router.post("", response_model=ApiResponse[AssetResponse], status_code=201)
async def create_asset(
    *,
    db: AsyncSession = Depends(get_db),
    asset_in: AssetCreate,
) -> Any:
    asset = await asset_service.create_asset(db, asset_in)
    await db.commit()
    return ApiResponse[AssetResponse](
        data=await _build_asset_response(db, asset),
        message="Asset created successfully",
    )


@router.get("/{asset_id}", response_model=ApiResponse[AssetResponse])
async def get_asset(
    *,
    db: AsyncSession = Depends(get_db),
    asset_id: int,
) -> Any:
    asset = await crud.get_by_id(db, Asset, asset_id)
    return ApiResponse[AssetResponse](data=await _build_asset_response(db, asset))


@router.put("/{asset_id}", response_model=ApiResponse[AssetResponse])
async def update_asset(
    *,
    db: AsyncSession = Depends(get_db),
    asset_id: int,
    asset_in: AssetUpdate,
) -> Any:
    asset = await asset_service.update_asset(db, asset_id, asset_in)
    await db.commit()
    return ApiResponse[AssetResponse](
        data=await _build_asset_response(db, asset),
        message="Asset updated successfully",
    )


@router.delete("/{asset_id}", response_model=ApiResponse)
async def delete_asset(
    *,
    db: AsyncSession = Depends(get_db),
    asset_id: int,
) -> Any:
    await asset_service.delete_asset(db, asset_id)
    await db.commit()
    return ApiResponse(message="Asset deleted successfully")
