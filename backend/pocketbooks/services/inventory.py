"""
Inventory service

- receive / reverse procurement stock with weighted-average costing
- deduct / restore stock for sales
- produce finished goods from their bill of materials
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.enums import AuditAction, InventoryItemType
from pocketbooks.models.inventory import FinishedGood, FinishedGoodComponent, RawMaterial, TradingGood
from pocketbooks.models.procurement import ProcurementItem
from pocketbooks.services import crud
from pocketbooks.services.audit import create_audit_log
from pocketbooks.services.calculations import (
    ZERO, format_quantity, reverse_weighted_average_cost, to_decimal, weighted_average_cost,
)

logger = get_logger(__name__)

ITEM_MODELS = {
    InventoryItemType.RAW_MATERIAL.value: RawMaterial,
    InventoryItemType.TRADING_GOOD.value: TradingGood,
    InventoryItemType.FINISHED_GOOD.value: FinishedGood,
}

# (item_id, quantity, unit_price)
StockLine = Tuple[int, object, object]


def get_item_model(item_type: str):
    model = ITEM_MODELS.get(item_type)
    if model is None:
        raise HTTPException(status_code=400, detail=f"Unknown inventory item type: {item_type}")
    return model


async def get_inventory_item(db: AsyncSession, item_type: str, item_id: int):
    model = get_item_model(item_type)
    item = await db.get(model, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"{crud.model_label(model)} not found: {item_id}")
    return item


# ===== Procurement receipts =====

async def receive_stock(
    db: AsyncSession,
    item_type: str,
    lines: Iterable[StockLine],
    received_date: Optional[datetime] = None,
) -> None:
    """Book procured quantities into stock at weighted-average cost."""
    model = get_item_model(item_type)
    received_date = received_date or datetime.utcnow()
    for item_id, quantity, unit_price in lines:
        item = await db.get(model, item_id)
        if item is None:
            logger.warning(f"{item_type} {item_id} not found, skipping stock receipt")
            continue
        previous_stock = to_decimal(item.current_stock)
        previous_cost = to_decimal(item.cost_price)
        item.cost_price = weighted_average_cost(previous_stock, previous_cost, quantity, unit_price)
        item.current_stock = previous_stock + to_decimal(quantity)
        item.last_procurement_date = received_date
        logger.info(
            f"Received {item_type} {item.name}: stock {previous_stock} -> {item.current_stock}, "
            f"cost {previous_cost:.2f} -> {item.cost_price:.2f}"
        )
    await db.flush()


async def reverse_stock(db: AsyncSession, item_type: str, lines: Iterable[StockLine]) -> None:
    """Take procured quantities back out of stock, restoring the previous cost."""
    model = get_item_model(item_type)
    for item_id, quantity, unit_price in lines:
        item = await db.get(model, item_id)
        if item is None:
            continue
        stock, cost = reverse_weighted_average_cost(item.current_stock, item.cost_price, quantity, unit_price)
        logger.info(f"Reversed {item_type} {item.name}: stock {item.current_stock} -> {stock}")
        item.current_stock = stock
        item.cost_price = cost
    await db.flush()


# ===== Sales =====

async def check_stock(db: AsyncSession, lines: Iterable[Tuple[str, int, object]]) -> None:
    """
    400 when any ``(item_type, item_id, quantity)`` line exceeds stock.
    Quantities of repeated items are added up first.
    """
    required = {}
    for item_type, item_id, quantity in lines:
        key = (item_type, item_id)
        required[key] = required.get(key, ZERO) + to_decimal(quantity)
    for (item_type, item_id), quantity in required.items():
        item = await get_inventory_item(db, item_type, item_id)
        available = to_decimal(item.current_stock)
        if available < quantity:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for {item.name}. Available: {format_quantity(available)}, Requested: {format_quantity(quantity)}",
            )


async def deduct_stock(db: AsyncSession, lines: Iterable[Tuple[str, int, object]]) -> None:
    for item_type, item_id, quantity in lines:
        item = await get_inventory_item(db, item_type, item_id)
        item.current_stock = to_decimal(item.current_stock) - to_decimal(quantity)
    await db.flush()


async def restore_stock(db: AsyncSession, lines: Iterable[Tuple[str, int, object]]) -> None:
    for item_type, item_id, quantity in lines:
        item = await db.get(get_item_model(item_type), item_id)
        if item is None:
            logger.warning(f"{item_type} {item_id} no longer exists, stock not restored")
            continue
        item.current_stock = to_decimal(item.current_stock) + to_decimal(quantity)
    await db.flush()


# ===== Catalogue rules =====

def check_selling_price(selling_price, cost, cost_label: str = "cost price") -> None:
    if to_decimal(selling_price) < to_decimal(cost):
        raise HTTPException(status_code=400, detail=f"Selling price cannot be less than {cost_label}")


async def build_components(db: AsyncSession, components) -> List[FinishedGoodComponent]:
    result = []
    seen = set()
    for component in components:
        if component.raw_material_id in seen:
            raise HTTPException(status_code=400, detail="Each raw material can appear only once in the bill of materials")
        seen.add(component.raw_material_id)
        if await db.get(RawMaterial, component.raw_material_id) is None:
            raise HTTPException(status_code=404, detail=f"Raw material not found: {component.raw_material_id}")
        result.append(
            FinishedGoodComponent(
                raw_material_id=component.raw_material_id,
                quantity_required=to_decimal(component.quantity_required),
            )
        )
    return result


async def ensure_raw_material_unused(db: AsyncSession, raw_material_id: int) -> None:
    procurements = await crud.count_where(db, ProcurementItem, ProcurementItem.raw_material_id == raw_material_id)
    if procurements:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete raw material referenced by {procurements} procurement item(s)",
        )
    components = await crud.count_where(
        db, FinishedGoodComponent, FinishedGoodComponent.raw_material_id == raw_material_id
    )
    if components:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete raw material used by {components} finished good(s)",
        )


async def ensure_trading_good_unused(db: AsyncSession, trading_good_id: int) -> None:
    procurements = await crud.count_where(db, ProcurementItem, ProcurementItem.trading_good_id == trading_good_id)
    if procurements:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete trading good referenced by {procurements} procurement item(s)",
        )


# ===== Production =====

async def produce_finished_good(
    db: AsyncSession,
    finished_good_id: int,
    quantity,
    notes: Optional[str] = None,
) -> FinishedGood:
    """
    Manufacture ``quantity`` units: every component consumes
    ``quantity_required * quantity`` raw material. Nothing changes unless
    all components have enough stock.
    """
    finished_good = await crud.get_by_id(db, FinishedGood, finished_good_id)
    quantity = to_decimal(quantity)
    if not finished_good.components:
        raise HTTPException(status_code=400, detail="Finished good has no bill of materials")

    consumption = []
    for component in finished_good.components:
        material = await db.get(RawMaterial, component.raw_material_id)
        if material is None:
            raise HTTPException(status_code=404, detail=f"Raw material not found: {component.raw_material_id}")
        needed = to_decimal(component.quantity_required) * quantity
        available = to_decimal(material.current_stock)
        if available < needed:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for {material.name}. Available: {format_quantity(available)}, Required: {format_quantity(needed)}",
            )
        consumption.append((material, needed))

    for material, needed in consumption:
        material.current_stock = to_decimal(material.current_stock) - needed

    old_stock = to_decimal(finished_good.current_stock)
    finished_good.current_stock = old_stock + quantity
    finished_good.last_manufacture_date = datetime.utcnow()

    create_audit_log(
        db,
        action=AuditAction.STOCK_ADJUSTMENT.value,
        entity_type="finished_good",
        entity_id=finished_good.id,
        description=notes or f"Produced {format_quantity(quantity)} {finished_good.unit} of {finished_good.name}",
        old_value={"current_stock": float(old_stock)},
        new_value={
            "current_stock": float(finished_good.current_stock),
            "consumed": [
                {"raw_material_id": m.id, "name": m.name, "quantity": float(n)} for m, n in consumption
            ],
        },
    )
    await db.flush()
    logger.info(f"Produced {quantity} x {finished_good.name}")
    return finished_good


async def bill_of_materials_lines(db: AsyncSession, finished_good: FinishedGood):
    """``(quantity_required, cost_price)`` for each component."""
    lines = []
    for component in finished_good.components:
        material = await db.get(RawMaterial, component.raw_material_id)
        lines.append((component.quantity_required, material.cost_price if material else ZERO))
    return lines


async def low_stock(db: AsyncSession, model, limit: int = 5):
    result = await db.execute(
        select(model).where(model.current_stock < model.reorder_level).order_by(model.current_stock.asc()).limit(limit)
    )
    return result.scalars().all()
