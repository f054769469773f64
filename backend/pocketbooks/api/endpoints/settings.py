"""Settings API - raw material types"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.models.raw_material_type import RawMaterialType
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.raw_material_type import (
    RawMaterialTypeCreate, RawMaterialTypeResponse, RawMaterialTypeUpdate,
)
from pocketbooks.services import crud
from pocketbooks.services.crud import ListParams

router = APIRouter()


@router.get("/raw-material-types", response_model=PaginatedResponse[RawMaterialTypeResponse])
async def list_raw_material_types(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
) -> Any:
    types, pagination = await crud.get_all(db, RawMaterialType, params, ("name", "description"))
    return PaginatedResponse[RawMaterialTypeResponse](
        data=[RawMaterialTypeResponse.model_validate(t) for t in types],
        pagination=pagination,
    )


@router.get("/raw-material-types/{type_id}", response_model=ApiResponse[RawMaterialTypeResponse])
async def get_raw_material_type(
    *,
    db: AsyncSession = Depends(get_db),
    type_id: int,
) -> Any:
    material_type = await crud.get_by_id(db, RawMaterialType, type_id)
    return ApiResponse[RawMaterialTypeResponse](data=RawMaterialTypeResponse.model_validate(material_type))


@router.post("/raw-material-types", response_model=ApiResponse[RawMaterialTypeResponse], status_code=201)
async def create_raw_material_type(
    *,
    db: AsyncSession = Depends(get_db),
    type_in: RawMaterialTypeCreate,
) -> Any:
    material_type = await crud.create(db, RawMaterialType, type_in.model_dump(), unique_field="name")
    await db.commit()
    return ApiResponse[RawMaterialTypeResponse](
        data=RawMaterialTypeResponse.model_validate(material_type),
        message="Raw material type created successfully",
    )


@router.put("/raw-material-types/{type_id}", response_model=ApiResponse[RawMaterialTypeResponse])
async def update_raw_material_type(
    *,
    db: AsyncSession = Depends(get_db),
    type_id: int,
    type_in: RawMaterialTypeUpdate,
) -> Any:
    data = type_in.model_dump(exclude_unset=True)
    if data.get("name"):
        data["name"] = data["name"].strip()
    material_type = await crud.update(db, RawMaterialType, type_id, data, unique_field="name")
    await db.commit()
    return ApiResponse[RawMaterialTypeResponse](
        data=RawMaterialTypeResponse.model_validate(material_type),
        message="Raw material type updated successfully",
    )


@router.delete("/raw-material-types/{type_id}", response_model=ApiResponse)
async def delete_raw_material_type(
    *,
    db: AsyncSession = Depends(get_db),
    type_id: int,
) -> Any:
    await crud.delete(db, RawMaterialType, type_id)
    await db.commit()
    return ApiResponse(message="Raw material type deleted successfully")
