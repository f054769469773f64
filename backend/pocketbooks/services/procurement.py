"""
Procurement service

Stock is in inventory while a procurement is ``received`` or ``completed``.
The vendor owes-balance carries each procurement's remaining amount unless
the procurement is cancelled.
"""

from datetime import datetime
from typing import List

from fastapi import HTTPException
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.enums import (
    AccountType, AuditAction, PartyType, ProcurementStatus, ProcurementType, TransactionType,
)
from pocketbooks.models.payment import Payment
from pocketbooks.models.procurement import Procurement, ProcurementItem
from pocketbooks.models.vendor import Vendor
from pocketbooks.schemas.procurement import (
    ProcurementCreate, ProcurementPaymentCreate, ProcurementUpdate,
)
from pocketbooks.services import balances, crud, inventory
from pocketbooks.services.audit import create_audit_log, snapshot
from pocketbooks.services.calculations import line_amount, procurement_totals, to_decimal

logger = get_logger(__name__)

# URL segment -> procurement_type
PROCUREMENT_TYPES = {
    "raw-material": ProcurementType.RAW_MATERIAL.value,
    "trading-good": ProcurementType.TRADING_GOOD.value,
}

STOCK_STATUSES = (ProcurementStatus.RECEIVED.value, ProcurementStatus.COMPLETED.value)

AUDIT_FIELDS = ("status", "vendor_id", "total_amount", "gst_amount", "grand_total", "total_paid", "remaining_amount")


def resolve_type(type_slug: str) -> str:
    procurement_type = PROCUREMENT_TYPES.get(type_slug)
    if procurement_type is None:
        raise HTTPException(status_code=400, detail="Invalid procurement type")
    return procurement_type


def stock_lines(procurement: Procurement):
    return [(item.item_id, item.quantity, item.unit_price) for item in procurement.items]


async def get_procurement(db: AsyncSession, procurement_type: str, procurement_id: int) -> Procurement:
    result = await db.execute(
        select(Procurement)
        .where(Procurement.id == procurement_id, Procurement.procurement_type == procurement_type)
        .execution_options(populate_existing=True)
    )
    procurement = result.scalar_one_or_none()
    if procurement is None:
        raise HTTPException(status_code=404, detail="Procurement not found")
    return procurement


async def _get_vendor(db: AsyncSession, vendor_id: int) -> Vendor:
    vendor = await db.get(Vendor, vendor_id)
    if vendor is None:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor


async def _ensure_invoice_unique(db: AsyncSession, vendor_id: int, invoice_number, exclude_id=None) -> None:
    if not invoice_number:
        return
    query = select(Procurement.id).where(
        Procurement.vendor_id == vendor_id, Procurement.invoice_number == invoice_number
    )
    if exclude_id is not None:
        query = query.where(Procurement.id != exclude_id)
    if (await db.execute(query.limit(1))).first() is not None:
        raise HTTPException(status_code=409, detail="invoice_number already exists for this vendor")


async def _build_items(db: AsyncSession, procurement_type: str, items_in) -> List[ProcurementItem]:
    items = []
    for item_in in items_in:
        stock_item = await inventory.get_inventory_item(db, procurement_type, item_in.item_id)
        item = ProcurementItem(
            item_name=stock_item.name,
            quantity=to_decimal(item_in.quantity),
            unit_price=to_decimal(item_in.unit_price),
            amount=line_amount(item_in.quantity, item_in.unit_price),
        )
        if procurement_type == ProcurementType.RAW_MATERIAL.value:
            item.raw_material_id = item_in.item_id
        else:
            item.trading_good_id = item_in.item_id
        items.append(item)
    return items


def _apply_totals(procurement: Procurement, items) -> None:
    totals = procurement_totals(((i.quantity, i.unit_price) for i in items), procurement.gst_percentage)
    procurement.total_amount = totals.total_amount
    procurement.gst_amount = totals.gst_amount
    procurement.grand_total = totals.grand_total
    balances.apply_procurement_totals(procurement)


async def create_procurement(db: AsyncSession, procurement_type: str, data: ProcurementCreate) -> Procurement:
    """
    Create a procurement.

    - optional initial payment is recorded as a purchase payment
    - remaining amount is added to the vendor's payable
    - stock is received immediately when created as received / completed
    """
    await _get_vendor(db, data.vendor_id)
    await _ensure_invoice_unique(db, data.vendor_id, data.invoice_number)

    fields = data.model_dump(exclude={"items", "initial_payment"})
    fields["gst_percentage"] = to_decimal(fields["gst_percentage"])
    items = await _build_items(db, procurement_type, data.items)

    procurement = Procurement(procurement_type=procurement_type, total_paid=to_decimal(0), **fields)
    procurement.items = items
    _apply_totals(procurement, items)

    initial = data.initial_payment
    if initial and initial.amount > 0 and to_decimal(initial.amount) > procurement.grand_total:
        raise HTTPException(status_code=400, detail="Initial payment cannot exceed the grand total")

    if procurement.stock_received and procurement.received_date is None:
        procurement.received_date = datetime.utcnow()

    db.add(procurement)
    await db.flush()

    if initial and initial.amount > 0:
        balances.record_payment(
            db,
            payment_date=initial.payment_date,
            amount=initial.amount,
            payment_method=initial.payment_method,
            transaction_type=TransactionType.PURCHASE.value,
            transaction_id=initial.transaction_id,
            account_type=AccountType.PAYABLE.value,
            party_id=data.vendor_id,
            party_type=PartyType.VENDOR.value,
            procurement_id=procurement.id,
            procurement_type=procurement_type,
            tranche_number=1,
            total_tranches=initial.total_tranches,
            notes=initial.notes or f"Initial payment for {procurement_type} procurement: {procurement.id}",
        )
        await db.flush()
        procurement.total_paid = await balances.sum_payments(db, Payment.procurement_id == procurement.id)
        balances.apply_procurement_totals(procurement)

    await balances.adjust_vendor_payable(db, procurement.vendor_id, balances.procurement_payable(procurement))

    if procurement.stock_received:
        await inventory.receive_stock(db, procurement_type, stock_lines(procurement), procurement.received_date)

    create_audit_log(
        db,
        action=AuditAction.CREATE.value,
        entity_type="procurement",
        entity_id=procurement.id,
        description=f"{procurement_type} procurement from vendor {procurement.vendor_id}",
        new_value=snapshot(procurement, AUDIT_FIELDS),
    )
    await db.flush()
    logger.info(f"Created {procurement_type} procurement {procurement.id} ({procurement.grand_total})")
    return procurement


async def update_procurement(
    db: AsyncSession, procurement_type: str, procurement_id: int, data: ProcurementUpdate
) -> Procurement:
    """
    Update a procurement and carry the side effects:

    - into received/completed: stock received; out of them: stock reversed
    - item changes while received: old lines reversed, new lines received
    - cancelled procurements owe nothing; un-cancelling owes again
    - total changes move the vendor payable by the difference, across vendors
      when vendor_id changes
    """
    procurement = await get_procurement(db, procurement_type, procurement_id)
    changes = crud.drop_required_nulls(Procurement, data.model_dump(exclude_unset=True))
    before = snapshot(procurement, AUDIT_FIELDS)

    old_status = procurement.status
    old_vendor_id = procurement.vendor_id
    old_payable = balances.procurement_payable(procurement)
    old_lines = stock_lines(procurement)

    new_status = changes.pop("status", None) or old_status
    new_vendor_id = changes.pop("vendor_id", None) or old_vendor_id
    items_in = changes.pop("items", None)

    if new_vendor_id != old_vendor_id:
        await _get_vendor(db, new_vendor_id)
    invoice_number = changes.get("invoice_number", procurement.invoice_number)
    if new_vendor_id != old_vendor_id or "invoice_number" in changes:
        await _ensure_invoice_unique(db, new_vendor_id, invoice_number, exclude_id=procurement.id)

    was_received = old_status in STOCK_STATUSES
    will_receive = new_status in STOCK_STATUSES

    if was_received and (items_in is not None or not will_receive):
        await inventory.reverse_stock(db, procurement_type, old_lines)

    if "gst_percentage" in changes:
        changes["gst_percentage"] = to_decimal(changes["gst_percentage"])
    for field, value in changes.items():
        setattr(procurement, field, value)
    procurement.vendor_id = new_vendor_id
    procurement.status = new_status

    items = procurement.items
    if items_in is not None:
        items = await _build_items(db, procurement_type, items_in)
        procurement.items = items
    _apply_totals(procurement, items)

    if will_receive and (items_in is not None or not was_received):
        if not was_received and procurement.received_date is None:
            procurement.received_date = datetime.utcnow()
        await inventory.receive_stock(db, procurement_type, stock_lines(procurement), procurement.received_date)

    if new_vendor_id != old_vendor_id:
        await db.execute(
            update(Payment)
            .where(Payment.procurement_id == procurement.id)
            .values(party_id=new_vendor_id)
        )
        await balances.adjust_vendor_payable(db, old_vendor_id, -old_payable)
        await balances.adjust_vendor_payable(db, new_vendor_id, balances.procurement_payable(procurement))
    else:
        await balances.adjust_vendor_payable(
            db, new_vendor_id, balances.procurement_payable(procurement) - old_payable
        )

    status_changed = new_status != old_status
    create_audit_log(
        db,
        action=(AuditAction.STATUS_CHANGE if status_changed else AuditAction.UPDATE).value,
        entity_type="procurement",
        entity_id=procurement.id,
        description=f"Status {old_status} -> {new_status}" if status_changed else "Procurement updated",
        old_value=before,
        new_value=snapshot(procurement, AUDIT_FIELDS),
    )
    await db.flush()
    return procurement


async def delete_procurement(db: AsyncSession, procurement_type: str, procurement_id: int) -> None:
    procurement = await get_procurement(db, procurement_type, procurement_id)

    if procurement.stock_received:
        await inventory.reverse_stock(db, procurement_type, stock_lines(procurement))
    await balances.adjust_vendor_payable(db, procurement.vendor_id, -balances.procurement_payable(procurement))

    payments = (await db.execute(select(Payment).where(Payment.procurement_id == procurement.id))).scalars().all()
    for payment in payments:
        await db.delete(payment)

    create_audit_log(
        db,
        action=AuditAction.DELETE.value,
        entity_type="procurement",
        entity_id=procurement.id,
        description=f"Deleted {procurement_type} procurement with {len(payments)} payment(s)",
        old_value=snapshot(procurement, AUDIT_FIELDS),
    )
    await db.delete(procurement)
    await db.flush()


async def list_payments(db: AsyncSession, procurement_type: str, procurement_id: int):
    await get_procurement(db, procurement_type, procurement_id)
    result = await db.execute(
        select(Payment)
        .where(Payment.procurement_id == procurement_id)
        .order_by(Payment.payment_date.asc(), Payment.id.asc())
    )
    return result.scalars().all()


async def add_payment(
    db: AsyncSession, procurement_type: str, procurement_id: int, data: ProcurementPaymentCreate
) -> Payment:
    procurement = await get_procurement(db, procurement_type, procurement_id)
    if procurement.status == ProcurementStatus.CANCELLED.value:
        raise HTTPException(status_code=400, detail="Cannot add a payment to a cancelled procurement")
    if to_decimal(data.amount) > to_decimal(procurement.remaining_amount):
        raise HTTPException(
            status_code=400,
            detail=f"Payment amount exceeds remaining amount of {procurement.remaining_amount}",
        )

    existing = await balances.count_payments(db, Payment.procurement_id == procurement.id)
    tranche_number = data.tranche_number or existing + 1
    payment = balances.record_payment(
        db,
        payment_date=data.payment_date,
        amount=data.amount,
        payment_method=data.payment_method,
        transaction_type=TransactionType.PURCHASE.value,
        transaction_id=data.transaction_id,
        account_type=AccountType.PAYABLE.value,
        party_id=procurement.vendor_id,
        party_type=PartyType.VENDOR.value,
        procurement_id=procurement.id,
        procurement_type=procurement_type,
        tranche_number=tranche_number,
        total_tranches=max(data.total_tranches or 1, tranche_number),
        notes=data.notes,
    )
    await balances.sync_procurement(db, procurement)

    create_audit_log(
        db,
        action=AuditAction.PAYMENT_RECEIVED.value,
        entity_type="procurement",
        entity_id=procurement.id,
        description=f"Payment of {payment.amount} to vendor {procurement.vendor_id}",
        new_value={"payment_id": payment.id, "total_paid": float(procurement.total_paid)},
    )
    await db.flush()
    return payment


def _empty_type_stats() -> dict:
    return {
        "count": 0,
        "total_value": 0.0,
        "total_paid": 0.0,
        "total_remaining": 0.0,
        "by_status": {},
        "by_payment_status": {},
    }


async def get_stats(db: AsyncSession) -> dict:
    result = await db.execute(
        select(
            Procurement.procurement_type,
            Procurement.status,
            Procurement.payment_status,
            func.count(Procurement.id),
            func.coalesce(func.sum(Procurement.grand_total), 0),
            func.coalesce(func.sum(Procurement.total_paid), 0),
            func.coalesce(func.sum(Procurement.remaining_amount), 0),
        ).group_by(Procurement.procurement_type, Procurement.status, Procurement.payment_status)
    )

    stats = {t.value: _empty_type_stats() for t in ProcurementType}
    for ptype, status, pay_status, count, value, paid, remaining in result.all():
        bucket = stats.setdefault(ptype, _empty_type_stats())
        bucket["count"] += count
        bucket["by_status"][status] = bucket["by_status"].get(status, 0) + count
        bucket["by_payment_status"][pay_status] = bucket["by_payment_status"].get(pay_status, 0) + count
        if status == ProcurementStatus.CANCELLED.value:
            continue
        bucket["total_value"] += float(value)
        bucket["total_paid"] += float(paid)
        bucket["total_remaining"] += float(remaining)

    return {
        "raw_material": stats[ProcurementType.RAW_MATERIAL.value],
        "trading_good": stats[ProcurementType.TRADING_GOOD.value],
        "total_value": round(sum(s["total_value"] for s in stats.values()), 2),
        "total_paid": round(sum(s["total_paid"] for s in stats.values()), 2),
        "total_remaining": round(sum(s["total_remaining"] for s in stats.values()), 2),
    }
