"""Vendor API"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.asset import Asset, AssetProcurement
from pocketbooks.models.procurement import Procurement
from pocketbooks.models.vendor import Vendor
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.vendor import VendorCreate, VendorResponse, VendorUpdate
from pocketbooks.services import crud
from pocketbooks.services.crud import ListParams

logger = get_logger(__name__)
router = APIRouter()

SEARCH_FIELDS = ("name", "email", "contact_person")


@router.get("", response_model=PaginatedResponse[VendorResponse])
async def list_vendors(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
) -> Any:
    vendors, pagination = await crud.get_all(db, Vendor, params, SEARCH_FIELDS)
    return PaginatedResponse[VendorResponse](
        data=[VendorResponse.model_validate(v) for v in vendors],
        pagination=pagination,
    )


@router.get("/{vendor_id}", response_model=ApiResponse[VendorResponse])
async def get_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_id: int,
) -> Any:
    vendor = await crud.get_by_id(db, Vendor, vendor_id)
    return ApiResponse[VendorResponse](data=VendorResponse.model_validate(vendor))


@router.post("", response_model=ApiResponse[VendorResponse], status_code=201)
async def create_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_in: VendorCreate,
) -> Any:
    vendor = await crud.create(db, Vendor, vendor_in.model_dump(), unique_field="email")
    await db.commit()
    logger.info(f"Created vendor {vendor.id}: {vendor.name}")
    return ApiResponse[VendorResponse](
        data=VendorResponse.model_validate(vendor),
        message="Vendor created successfully",
    )


@router.put("/{vendor_id}", response_model=ApiResponse[VendorResponse])
async def update_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_id: int,
    vendor_in: VendorUpdate,
) -> Any:
    data = vendor_in.model_dump(exclude_unset=True)
    if data.get("raw_material_types") is not None:
        data["raw_material_types"] = list(dict.fromkeys(t.strip() for t in data["raw_material_types"] if t.strip()))
    vendor = await crud.update(db, Vendor, vendor_id, data, unique_field="email")
    await db.commit()
    return ApiResponse[VendorResponse](
        data=VendorResponse.model_validate(vendor),
        message="Vendor updated successfully",
    )


@router.delete("/{vendor_id}", response_model=ApiResponse)
async def delete_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_id: int,
) -> Any:
    """Refused while any procurement, asset purchase or asset points at the vendor."""
    await crud.get_by_id(db, Vendor, vendor_id)

    references = {
        "procurement(s)": await crud.count_where(db, Procurement, Procurement.vendor_id == vendor_id),
        "asset procurement(s)": await crud.count_where(
            db, AssetProcurement, AssetProcurement.vendor_id == vendor_id
        ),
        "asset(s)": await crud.count_where(db, Asset, Asset.vendor_id == vendor_id),
    }
    in_use = [f"{count} {label}" for label, count in references.items() if count]
    if in_use:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete vendor referenced by {', '.join(in_use)}",
        )

    await crud.delete(db, Vendor, vendor_id)
    await db.commit()
    logger.info(f"Deleted vendor {vendor_id}")
    return ApiResponse(message="Vendor deleted successfully")
