"""Inventory API - raw materials, trading goods and finished goods"""

from typing import Any, Dict, Iterable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.deps import get_db
from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.inventory import FinishedGood, RawMaterial, TradingGood
from pocketbooks.schemas.common import ApiResponse, PaginatedResponse
from pocketbooks.schemas.inventory import (
    FinishedGoodCreate, FinishedGoodResponse, FinishedGoodUpdate, ProduceRequest,
    RawMaterialCreate, RawMaterialResponse, RawMaterialUpdate,
    TradingGoodCreate, TradingGoodResponse, TradingGoodUpdate,
)
from pocketbooks.services import crud, inventory
from pocketbooks.services.calculations import profit_margin
from pocketbooks.services.crud import ListParams

logger = get_logger(__name__)
router = APIRouter()


def _low_stock_filter(model, low_stock: Optional[bool]):
    if low_stock is None:
        return []
    if low_stock:
        return [model.current_stock <= model.reorder_level]
    return [model.current_stock > model.reorder_level]


# ========== Raw materials ==========

async def _finished_good_names(db: AsyncSession, ids: Iterable[Optional[int]]) -> Dict[int, str]:
    ids = {i for i in ids if i}
    if not ids:
        return {}
    rows = await db.execute(select(FinishedGood.id, FinishedGood.name).where(FinishedGood.id.in_(ids)))
    return dict(rows.all())


def _build_raw_material_response(material: RawMaterial, names: Dict[int, str]) -> RawMaterialResponse:
    response = RawMaterialResponse.model_validate(material)
    response.intended_for_name = names.get(material.intended_for_id)
    return response


async def _check_intended_for(db: AsyncSession, finished_good_id: Optional[int]) -> None:
    if finished_good_id is not None and await db.get(FinishedGood, finished_good_id) is None:
        raise HTTPException(status_code=404, detail="Finished good not found")


@router.get("/raw-materials", response_model=PaginatedResponse[RawMaterialResponse])
async def list_raw_materials(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    low_stock: Optional[bool] = Query(None),
) -> Any:
    materials, pagination = await crud.get_all(
        db, RawMaterial, params, ("name",), filters=_low_stock_filter(RawMaterial, low_stock)
    )
    names = await _finished_good_names(db, (m.intended_for_id for m in materials))
    return PaginatedResponse[RawMaterialResponse](
        data=[_build_raw_material_response(m, names) for m in materials],
        pagination=pagination,
    )


@router.get("/raw-materials/{material_id}", response_model=ApiResponse[RawMaterialResponse])
async def get_raw_material(
    *,
    db: AsyncSession = Depends(get_db),
    material_id: int,
) -> Any:
    material = await crud.get_by_id(db, RawMaterial, material_id)
    names = await _finished_good_names(db, [material.intended_for_id])
    return ApiResponse[RawMaterialResponse](data=_build_raw_material_response(material, names))


@router.post("/raw-materials", response_model=ApiResponse[RawMaterialResponse], status_code=201)
async def create_raw_material(
    *,
    db: AsyncSession = Depends(get_db),
    material_in: RawMaterialCreate,
) -> Any:
    await _check_intended_for(db, material_in.intended_for_id)
    material = await crud.create(db, RawMaterial, material_in.model_dump())
    await db.commit()
    names = await _finished_good_names(db, [material.intended_for_id])
    return ApiResponse[RawMaterialResponse](
        data=_build_raw_material_response(material, names),
        message="Raw material created successfully",
    )


@router.put("/raw-materials/{material_id}", response_model=ApiResponse[RawMaterialResponse])
async def update_raw_material(
    *,
    db: AsyncSession = Depends(get_db),
    material_id: int,
    material_in: RawMaterialUpdate,
) -> Any:
    data = material_in.model_dump(exclude_unset=True)
    await _check_intended_for(db, data.get("intended_for_id"))
    material = await crud.update(db, RawMaterial, material_id, data)
    await db.commit()
    names = await _finished_good_names(db, [material.intended_for_id])
    return ApiResponse[RawMaterialResponse](
        data=_build_raw_material_response(material, names),
        message="Raw material updated successfully",
    )


@router.delete("/raw-materials/{material_id}", response_model=ApiResponse)
async def delete_raw_material(
    *,
    db: AsyncSession = Depends(get_db),
    material_id: int,
) -> Any:
    await crud.get_by_id(db, RawMaterial, material_id)
    await inventory.ensure_raw_material_unused(db, material_id)
    await crud.delete(db, RawMaterial, material_id)
    await db.commit()
    return ApiResponse(message="Raw material deleted successfully")


# ========== Trading goods ==========

def _build_trading_good_response(good: TradingGood) -> TradingGoodResponse:
    response = TradingGoodResponse.model_validate(good)
    response.profit_margin = profit_margin(good.cost_price, good.selling_price)
    return response


@router.get("/trading-goods", response_model=PaginatedResponse[TradingGoodResponse])
async def list_trading_goods(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
    low_stock: Optional[bool] = Query(None),
) -> Any:
    goods, pagination = await crud.get_all(
        db, TradingGood, params, ("name", "sku"), filters=_low_stock_filter(TradingGood, low_stock)
    )
    return PaginatedResponse[TradingGoodResponse](
        data=[_build_trading_good_response(g) for g in goods],
        pagination=pagination,
    )


@router.get("/trading-goods/{good_id}", response_model=ApiResponse[TradingGoodResponse])
async def get_trading_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_id: int,
) -> Any:
    good = await crud.get_by_id(db, TradingGood, good_id)
    return ApiResponse[TradingGoodResponse](data=_build_trading_good_response(good))


@router.post("/trading-goods", response_model=ApiResponse[TradingGoodResponse], status_code=201)
async def create_trading_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_in: TradingGoodCreate,
) -> Any:
    inventory.check_selling_price(good_in.selling_price, good_in.cost_price)
    good = await crud.create(db, TradingGood, good_in.model_dump(), unique_field="sku")
    await db.commit()
    return ApiResponse[TradingGoodResponse](
        data=_build_trading_good_response(good),
        message="Trading good created successfully",
    )


@router.put("/trading-goods/{good_id}", response_model=ApiResponse[TradingGoodResponse])
async def update_trading_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_id: int,
    good_in: TradingGoodUpdate,
) -> Any:
    data = good_in.model_dump(exclude_unset=True)
    current = await crud.get_by_id(db, TradingGood, good_id)
    inventory.check_selling_price(
        data.get("selling_price") if data.get("selling_price") is not None else current.selling_price,
        data.get("cost_price") if data.get("cost_price") is not None else current.cost_price,
    )
    good = await crud.update(db, TradingGood, good_id, data, unique_field="sku")
    await db.commit()
    return ApiResponse[TradingGoodResponse](
        data=_build_trading_good_response(good),
        message="Trading good updated successfully",
    )


@router.delete("/trading-goods/{good_id}", response_model=ApiResponse)
async def delete_trading_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_id: int,
) -> Any:
    await crud.get_by_id(db, TradingGood, good_id)
    await inventory.ensure_trading_good_unused(db, good_id)
    await crud.delete(db, TradingGood, good_id)
    await db.commit()
    return ApiResponse(message="Trading good deleted successfully")


# ========== Finished goods ==========

async def _build_finished_good_response(db: AsyncSession, good: FinishedGood) -> FinishedGoodResponse:
    material_ids = [c.raw_material_id for c in good.components]
    materials = {}
    if material_ids:
        rows = await db.execute(
            select(RawMaterial.id, RawMaterial.name, RawMaterial.unit).where(RawMaterial.id.in_(material_ids))
        )
        materials = {mid: (name, unit) for mid, name, unit in rows.all()}

    components = []
    for c in good.components:
        name, unit = materials.get(c.raw_material_id, (None, None))
        components.append({
            "id": c.id,
            "raw_material_id": c.raw_material_id,
            "raw_material_name": name,
            "unit": unit,
            "quantity_required": c.quantity_required,
        })

    return FinishedGoodResponse(
        id=good.id,
        name=good.name,
        sku=good.sku,
        unit=good.unit,
        current_stock=good.current_stock,
        components=components,
        manufacturing_cost=good.manufacturing_cost,
        selling_price=good.selling_price,
        profit_margin=profit_margin(good.manufacturing_cost, good.selling_price),
        last_manufacture_date=good.last_manufacture_date,
        created_at=good.created_at,
        updated_at=good.updated_at,
    )


@router.get("/finished-goods", response_model=PaginatedResponse[FinishedGoodResponse])
async def list_finished_goods(
    *,
    db: AsyncSession = Depends(get_db),
    params: ListParams = Depends(),
) -> Any:
    goods, pagination = await crud.get_all(db, FinishedGood, params, ("name", "sku"))
    return PaginatedResponse[FinishedGoodResponse](
        data=[await _build_finished_good_response(db, g) for g in goods],
        pagination=pagination,
    )


@router.get("/finished-goods/{good_id}", response_model=ApiResponse[FinishedGoodResponse])
async def get_finished_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_id: int,
) -> Any:
    good = await crud.get_by_id(db, FinishedGood, good_id)
    return ApiResponse[FinishedGoodResponse](data=await _build_finished_good_response(db, good))


@router.post("/finished-goods", response_model=ApiResponse[FinishedGoodResponse], status_code=201)
async def create_finished_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_in: FinishedGoodCreate,
) -> Any:
    inventory.check_selling_price(good_in.selling_price, good_in.manufacturing_cost, "manufacturing cost")
    await crud.ensure_unique(db, FinishedGood, "sku", good_in.sku)

    components = await inventory.build_components(db, good_in.components)
    good = FinishedGood(**crud.coerce_numeric(FinishedGood, good_in.model_dump(exclude={"components"})))
    good.components = components
    db.add(good)
    await db.commit()

    logger.info(f"Created finished good {good.id}: {good.name} ({len(components)} component(s))")
    return ApiResponse[FinishedGoodResponse](
        data=await _build_finished_good_response(db, good),
        message="Finished good created successfully",
    )


@router.put("/finished-goods/{good_id}", response_model=ApiResponse[FinishedGoodResponse])
async def update_finished_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_id: int,
    good_in: FinishedGoodUpdate,
) -> Any:
    data = good_in.model_dump(exclude_unset=True)
    components_in = data.pop("components", None)
    current = await crud.get_by_id(db, FinishedGood, good_id)
    inventory.check_selling_price(
        data.get("selling_price") if data.get("selling_price") is not None else current.selling_price,
        data.get("manufacturing_cost") if data.get("manufacturing_cost") is not None else current.manufacturing_cost,
        "manufacturing cost",
    )

    good = await crud.update(db, FinishedGood, good_id, data, unique_field="sku")
    if components_in is not None:
        good.components = await inventory.build_components(db, good_in.components)
    await db.commit()
    return ApiResponse[FinishedGoodResponse](
        data=await _build_finished_good_response(db, good),
        message="Finished good updated successfully",
    )


@router.delete("/finished-goods/{good_id}", response_model=ApiResponse)
async def delete_finished_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_id: int,
) -> Any:
    good = await crud.get_by_id(db, FinishedGood, good_id)
    await db.execute(
        update(RawMaterial).where(RawMaterial.intended_for_id == good_id).values(intended_for_id=None)
    )
    await db.delete(good)
    await db.commit()
    return ApiResponse(message="Finished good deleted successfully")


@router.post("/finished-goods/{good_id}/produce", response_model=ApiResponse[FinishedGoodResponse])
async def produce_finished_good(
    *,
    db: AsyncSession = Depends(get_db),
    good_id: int,
    produce_in: ProduceRequest,
) -> Any:
    """Consume the bill of materials for ``quantity`` units and add them to stock."""
    good = await inventory.produce_finished_good(db, good_id, produce_in.quantity, produce_in.notes)
    await db.commit()
    return ApiResponse[FinishedGoodResponse](
        data=await _build_finished_good_response(db, good),
        message=f"Produced {produce_in.quantity:g} {good.unit} of {good.name}",
    )
