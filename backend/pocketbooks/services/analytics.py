"""Dashboard figures."""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.models.asset import Asset, AssetProcurement
from pocketbooks.models.enums import (
    InventoryItemType, LoanAccountStatus, ProcurementStatus, SaleStatus,
)
from pocketbooks.models.expense import Expense
from pocketbooks.models.inventory import FinishedGood, RawMaterial, TradingGood
from pocketbooks.models.loan import LoanAccount
from pocketbooks.models.procurement import Procurement
from pocketbooks.models.sale import Sale, SaleItem
from pocketbooks.services import inventory
from pocketbooks.services.calculations import ZERO, bill_of_materials_cost, money, to_decimal


async def _scalar_sum(db: AsyncSession, column, *conditions) -> Decimal:
    result = await db.execute(select(func.coalesce(func.sum(column), 0)).where(*conditions))
    return to_decimal(result.scalar() or 0)


async def unit_cost(db: AsyncSession, item_type: str, item_id: int, cache: dict) -> Decimal:
    """
    Cost of one unit: cost price for raw materials and trading goods,
    bill-of-materials cost for finished goods (manufacturing cost when the
    good has no components).
    """
    key = (item_type, item_id)
    if key in cache:
        return cache[key]
    cost = ZERO
    if item_type == InventoryItemType.FINISHED_GOOD.value:
        good = await db.get(FinishedGood, item_id)
        if good is not None:
            if good.components:
                cost = bill_of_materials_cost(await inventory.bill_of_materials_lines(db, good))
            else:
                cost = to_decimal(good.manufacturing_cost)
    else:
        model = RawMaterial if item_type == InventoryItemType.RAW_MATERIAL.value else TradingGood
        item = await db.get(model, item_id)
        if item is not None:
            cost = to_decimal(item.cost_price)
    cache[key] = cost
    return cost


async def cost_of_goods_sold(db: AsyncSession) -> Decimal:
    result = await db.execute(
        select(SaleItem.item_type, SaleItem.item_id, SaleItem.quantity)
        .join(Sale, Sale.id == SaleItem.sale_id)
        .where(Sale.status != SaleStatus.CANCELLED.value)
    )
    cache = {}
    total = ZERO
    for item_type, item_id, quantity in result.all():
        total += to_decimal(quantity) * await unit_cost(db, item_type, item_id, cache)
    return money(total)


def _low_stock_entry(item, item_type: str) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "item_type": item_type,
        "current_stock": float(item.current_stock),
        "reorder_level": float(item.reorder_level),
        "unit": item.unit,
    }


async def get_dashboard(db: AsyncSession) -> dict:
    active_sale = Sale.status != SaleStatus.CANCELLED.value
    total_sales = await _scalar_sum(db, Sale.grand_total, active_sale)
    receivables = await _scalar_sum(db, Sale.remaining_amount, active_sale)

    payables = (
        await _scalar_sum(db, Procurement.remaining_amount, Procurement.status != ProcurementStatus.CANCELLED.value)
        + await _scalar_sum(db, AssetProcurement.remaining_amount)
        + await _scalar_sum(
            db, Asset.remaining_amount, Asset.vendor_id.is_not(None), Asset.asset_procurement_id.is_(None)
        )
    )

    cogs = await cost_of_goods_sold(db)

    recent = (await db.execute(
        select(Sale).order_by(Sale.sale_date.desc(), Sale.id.desc()).limit(5)
    )).scalars().all()

    raw_low = await inventory.low_stock(db, RawMaterial)
    trading_low = await inventory.low_stock(db, TradingGood)

    return {
        "total_sales": float(money(total_sales)),
        "pending_receivables": float(money(receivables)),
        "pending_payables": float(money(payables)),
        "cost_of_goods_sold": float(cogs),
        "net_profit": float(money(total_sales - cogs)),
        "total_assets": float(money(await _scalar_sum(db, Asset.purchase_price))),
        "outstanding_loans": float(money(await _scalar_sum(
            db, LoanAccount.outstanding_amount, LoanAccount.status != LoanAccountStatus.CLOSED.value
        ))),
        "total_expenses": float(money(await _scalar_sum(db, Expense.amount))),
        "recent_sales": [
            {
                "id": s.id,
                "invoice_number": s.invoice_number,
                "client_name": s.client.name if s.client else None,
                "sale_date": s.sale_date,
                "grand_total": float(s.grand_total),
                "status": s.status,
                "payment_status": s.payment_status,
            }
            for s in recent
        ],
        "low_stock_items": {
            "raw_materials": [_low_stock_entry(i, InventoryItemType.RAW_MATERIAL.value) for i in raw_low],
            "trading_goods": [_low_stock_entry(i, InventoryItemType.TRADING_GOOD.value) for i in trading_low],
        },
    }
