"""
Asset service

- standalone assets owe their vendor their own remaining amount
- asset procurements create one asset per unit and owe the vendor the
  invoice's remaining amount
"""

from typing import List

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.asset import Asset, AssetProcurement, AssetProcurementItem
from pocketbooks.models.enums import (
    AccountType, AssetStatus, AuditAction, PartyType, ProcurementStatus, TransactionType,
)
from pocketbooks.models.payment import Payment
from pocketbooks.models.vendor import Vendor
from pocketbooks.schemas.asset import AssetCreate, AssetProcurementCreate, AssetUpdate
from pocketbooks.services import balances, crud
from pocketbooks.services.audit import create_audit_log, snapshot
from pocketbooks.services.calculations import ZERO, depreciation, line_amount, money, to_decimal

logger = get_logger(__name__)


async def _get_vendor(db: AsyncSession, vendor_id: int) -> Vendor:
    vendor = await db.get(Vendor, vendor_id)
    if vendor is None:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor


# ===== Assets =====

async def create_asset(db: AsyncSession, data: AssetCreate) -> Asset:
    if data.vendor_id is not None:
        await _get_vendor(db, data.vendor_id)

    fields = data.model_dump(exclude={"payment_details"})
    if fields.get("current_value") is None:
        fields["current_value"] = fields["purchase_price"]
    asset = Asset(**crud.coerce_numeric(Asset, fields))
    balances.apply_paid(asset, ZERO, asset.purchase_price)

    details = data.payment_details
    if details and details.amount > 0 and to_decimal(details.amount) > to_decimal(asset.purchase_price):
        raise HTTPException(status_code=400, detail="Payment cannot exceed the purchase price")

    db.add(asset)
    await db.flush()
    await balances.adjust_vendor_payable(db, asset.vendor_id, balances.asset_payable(asset))

    if details and details.amount > 0:
        balances.record_payment(
            db,
            payment_date=details.payment_date,
            amount=details.amount,
            payment_method=details.payment_method,
            transaction_type=TransactionType.PURCHASE.value,
            transaction_id=details.transaction_id,
            account_type=AccountType.PAYABLE.value,
            party_id=asset.vendor_id,
            party_type=PartyType.VENDOR.value if asset.vendor_id else None,
            asset_id=asset.id,
            total_tranches=details.total_tranches,
            notes=details.notes or f"Payment for asset: {asset.name}",
        )
        await balances.sync_asset(db, asset)

    await db.flush()
    logger.info(f"Created asset {asset.id}: {asset.name}")
    return asset


async def update_asset(db: AsyncSession, asset_id: int, data: AssetUpdate) -> Asset:
    asset = await crud.get_by_id(db, Asset, asset_id)
    old_payable = balances.asset_payable(asset)
    asset = await crud.update(db, Asset, asset_id, data.model_dump(exclude_unset=True))
    balances.apply_paid(asset, asset.total_paid, asset.purchase_price)
    await balances.adjust_vendor_payable(db, asset.vendor_id, balances.asset_payable(asset) - old_payable)
    await balances.sync_asset(db, asset)
    await db.flush()
    return asset


async def delete_asset(db: AsyncSession, asset_id: int) -> None:
    asset = await crud.get_by_id(db, Asset, asset_id)
    await balances.adjust_vendor_payable(db, asset.vendor_id, -balances.asset_payable(asset))
    payments = (await db.execute(select(Payment).where(Payment.asset_id == asset.id))).scalars().all()
    for payment in payments:
        await db.delete(payment)
    await db.delete(asset)
    await db.flush()


async def recalculate_all_asset_payments(db: AsyncSession) -> dict:
    """Re-derive every asset's payment totals from its payments."""
    assets = (await db.execute(select(Asset))).scalars().all()
    for asset in assets:
        await balances.sync_asset(db, asset)
    await db.flush()
    return {"total_assets": len(assets), "updated_count": len(assets)}


async def get_stats(db: AsyncSession) -> dict:
    assets = (await db.execute(select(Asset))).scalars().all()
    stats = {
        "total_assets": len(assets),
        "by_status": {s.value: 0 for s in AssetStatus},
        "by_category": {},
        "total_investment": ZERO,
        "total_current_value": ZERO,
        "total_depreciation": ZERO,
        "total_paid": ZERO,
        "total_remaining": ZERO,
    }
    for asset in assets:
        stats["by_status"][asset.status] = stats["by_status"].get(asset.status, 0) + 1
        stats["by_category"][asset.category] = stats["by_category"].get(asset.category, 0) + 1
        stats["total_investment"] += to_decimal(asset.purchase_price)
        stats["total_current_value"] += to_decimal(asset.current_value)
        stats["total_depreciation"] += depreciation(asset.purchase_price, asset.current_value)
        stats["total_paid"] += to_decimal(asset.total_paid)
        stats["total_remaining"] += to_decimal(asset.remaining_amount)
    for key in ("total_investment", "total_current_value", "total_depreciation", "total_paid", "total_remaining"):
        stats[key] = float(money(stats[key]))
    return stats


# ===== Asset procurement =====

async def asset_ids_for(db: AsyncSession, asset_procurement_id: int) -> List[int]:
    result = await db.execute(
        select(Asset.id).where(Asset.asset_procurement_id == asset_procurement_id).order_by(Asset.id)
    )
    return list(result.scalars().all())


async def create_asset_procurement(db: AsyncSession, data: AssetProcurementCreate) -> AssetProcurement:
    """
    Record an asset purchase invoice and materialise one asset per unit,
    named "<name> (i)" when more than one unit was bought.
    """
    await _get_vendor(db, data.vendor_id)

    items = [
        AssetProcurementItem(
            asset_name=item.asset_name,
            description=item.description,
            category=item.category,
            quantity=item.quantity,
            unit_price=to_decimal(item.unit_price),
            amount=line_amount(item.quantity, item.unit_price),
        )
        for item in data.items
    ]
    total = money(sum((i.amount for i in items), ZERO))
    gst = money(data.gst_amount)
    procurement = AssetProcurement(
        vendor_id=data.vendor_id,
        procurement_date=data.procurement_date,
        total_amount=total,
        gst_amount=gst,
        grand_total=money(total + gst),
        invoice_number=data.invoice_number,
        notes=data.notes,
        status=ProcurementStatus.RECEIVED.value,
    )
    procurement.items = items
    balances.apply_paid(procurement, ZERO, procurement.grand_total)

    details = data.payment_details
    if details and details.amount > 0 and to_decimal(details.amount) > procurement.grand_total:
        raise HTTPException(status_code=400, detail="Payment cannot exceed the grand total")

    db.add(procurement)
    await db.flush()

    for item in items:
        for i in range(item.quantity):
            name = f"{item.asset_name} ({i + 1})" if item.quantity > 1 else item.asset_name
            asset = Asset(
                name=name,
                description=item.description,
                category=item.category,
                purchase_date=data.procurement_date,
                purchase_price=item.unit_price,
                current_value=item.unit_price,
                vendor_id=data.vendor_id,
                asset_procurement_id=procurement.id,
                status=AssetStatus.ACTIVE.value,
            )
            balances.apply_paid(asset, ZERO, asset.purchase_price)
            db.add(asset)

    await balances.adjust_vendor_payable(db, procurement.vendor_id, procurement.remaining_amount)

    if details and details.amount > 0:
        balances.record_payment(
            db,
            payment_date=details.payment_date,
            amount=details.amount,
            payment_method=details.payment_method,
            transaction_type=TransactionType.PURCHASE.value,
            transaction_id=details.transaction_id,
            account_type=AccountType.PAYABLE.value,
            party_id=procurement.vendor_id,
            party_type=PartyType.VENDOR.value,
            asset_procurement_id=procurement.id,
            total_tranches=details.total_tranches,
            notes=details.notes or f"Payment for asset purchase {data.invoice_number or ''}".strip(),
        )
        await balances.sync_asset_procurement(db, procurement)

    create_audit_log(
        db,
        action=AuditAction.CREATE.value,
        entity_type="asset_procurement",
        entity_id=procurement.id,
        description=f"Asset purchase of {sum(i.quantity for i in items)} unit(s) from vendor {procurement.vendor_id}",
        new_value=snapshot(procurement, ("grand_total", "total_paid", "remaining_amount")),
    )
    await db.flush()
    return procurement


async def delete_asset_procurement(db: AsyncSession, asset_procurement_id: int) -> None:
    """
    Delete the invoice. Its assets stay but lose their link to the invoice
    and its vendor; its payments are removed.
    """
    procurement = await crud.get_by_id(db, AssetProcurement, asset_procurement_id)
    await balances.adjust_vendor_payable(db, procurement.vendor_id, -to_decimal(procurement.remaining_amount))

    assets = (await db.execute(
        select(Asset).where(Asset.asset_procurement_id == procurement.id)
    )).scalars().all()
    for asset in assets:
        asset.asset_procurement_id = None
        asset.vendor_id = None

    payments = (await db.execute(
        select(Payment).where(Payment.asset_procurement_id == procurement.id)
    )).scalars().all()
    for payment in payments:
        await db.delete(payment)

    create_audit_log(
        db,
        action=AuditAction.DELETE.value,
        entity_type="asset_procurement",
        entity_id=procurement.id,
        description=f"Deleted asset purchase, detached {len(assets)} asset(s)",
        old_value=snapshot(procurement, ("grand_total", "total_paid", "remaining_amount")),
    )
    await db.delete(procurement)
    await db.flush()
