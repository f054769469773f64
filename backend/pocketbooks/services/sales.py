"""
Sale service

Stock is deducted while a sale is not cancelled, and the client's
outstanding balance carries the sale's remaining amount on the same rule.
"""

from datetime import datetime
from typing import List

from fastapi import HTTPException
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.client import Client
from pocketbooks.models.enums import (
    AccountType, AuditAction, PartyType, SaleStatus, TransactionType,
)
from pocketbooks.models.payment import Payment
from pocketbooks.models.sale import Sale, SaleItem
from pocketbooks.schemas.sale import SaleCreate, SalePaymentCreate, SaleUpdate
from pocketbooks.services import balances, crud, inventory
from pocketbooks.services.audit import create_audit_log, snapshot
from pocketbooks.services.calculations import line_amount, sale_totals, to_decimal

logger = get_logger(__name__)

AUDIT_FIELDS = (
    "invoice_number", "client_id", "status", "subtotal", "discount", "gst_amount",
    "grand_total", "total_paid", "remaining_amount",
)


def item_lines(items):
    """``(item_type, item_id, quantity)`` for stock checks and movements"""
    return [(item.item_type, item.item_id, item.quantity) for item in items]


async def _get_client(db: AsyncSession, client_id: int) -> Client:
    client = await db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


async def generate_invoice_number(db: AsyncSession) -> str:
    """INV-<yyyymm>-<sequence>, skipping numbers already taken"""
    next_id = ((await db.execute(select(func.max(Sale.id)))).scalar() or 0) + 1
    prefix = f"INV-{datetime.utcnow():%Y%m}"
    while True:
        candidate = f"{prefix}-{next_id:05d}"
        taken = (await db.execute(select(Sale.id).where(Sale.invoice_number == candidate))).first()
        if taken is None:
            return candidate
        next_id += 1


async def _build_items(db: AsyncSession, items_in) -> List[SaleItem]:
    items = []
    for item_in in items_in:
        stock_item = await inventory.get_inventory_item(db, item_in.item_type, item_in.item_id)
        items.append(
            SaleItem(
                item_id=item_in.item_id,
                item_type=item_in.item_type,
                item_name=stock_item.name,
                quantity=to_decimal(item_in.quantity),
                unit_price=to_decimal(item_in.unit_price),
                total=line_amount(item_in.quantity, item_in.unit_price),
            )
        )
    return items


def _apply_totals(sale: Sale, items) -> None:
    subtotal = sum((to_decimal(i.total) for i in items), to_decimal(0))
    if to_decimal(sale.discount) > subtotal:
        raise HTTPException(status_code=400, detail="Discount cannot exceed the subtotal")
    totals = sale_totals(((i.quantity, i.unit_price) for i in items), sale.discount, sale.gst_percentage)
    sale.subtotal = totals.subtotal
    sale.gst_amount = totals.gst_amount
    sale.grand_total = totals.grand_total
    balances.apply_sale_totals(sale)


async def get_sale(db: AsyncSession, sale_id: int) -> Sale:
    return await crud.get_by_id(db, Sale, sale_id)


async def create_sale(db: AsyncSession, data: SaleCreate) -> Sale:
    await _get_client(db, data.client_id)

    invoice_number = data.invoice_number.strip() if data.invoice_number else None
    if invoice_number:
        await crud.ensure_unique(db, Sale, "invoice_number", invoice_number)
    else:
        invoice_number = await generate_invoice_number(db)

    items = await _build_items(db, data.items)
    await inventory.check_stock(db, item_lines(items))

    fields = data.model_dump(exclude={"items", "initial_payment", "invoice_number"})
    sale = Sale(
        invoice_number=invoice_number,
        status=SaleStatus.PENDING.value,
        total_paid=to_decimal(0),
        **crud.coerce_numeric(Sale, fields),
    )
    sale.items = items
    _apply_totals(sale, items)

    initial = data.initial_payment
    if initial and initial.amount > 0 and to_decimal(initial.amount) > sale.grand_total:
        raise HTTPException(status_code=400, detail="Initial payment cannot exceed the grand total")

    db.add(sale)
    await db.flush()
    await inventory.deduct_stock(db, item_lines(items))

    if initial and initial.amount > 0:
        balances.record_payment(
            db,
            payment_date=initial.payment_date,
            amount=initial.amount,
            payment_method=initial.payment_method,
            transaction_type=TransactionType.SALE.value,
            transaction_id=initial.transaction_id,
            account_type=AccountType.RECEIVABLE.value,
            party_id=sale.client_id,
            party_type=PartyType.CLIENT.value,
            sale_id=sale.id,
            tranche_number=1,
            total_tranches=initial.total_tranches,
            notes=initial.notes or f"Initial payment for sale: {sale.invoice_number}",
        )
        await db.flush()
        sale.total_paid = await balances.sum_payments(db, Payment.sale_id == sale.id)
        balances.apply_sale_totals(sale)

    await balances.adjust_client_balance(db, sale.client_id, balances.sale_receivable(sale))

    create_audit_log(
        db,
        action=AuditAction.CREATE.value,
        entity_type="sale",
        entity_id=sale.id,
        description=f"Sale {sale.invoice_number} to client {sale.client_id}",
        new_value=snapshot(sale, AUDIT_FIELDS),
    )
    await db.flush()
    logger.info(f"Created sale {sale.invoice_number} ({sale.grand_total})")
    return sale


async def update_sale(db: AsyncSession, sale_id: int, data: SaleUpdate) -> Sale:
    """
    Update a sale. New item lines are checked against stock after the old
    lines have been put back; the client balance follows the new remaining
    amount, moving to the new client when client_id changes.
    """
    sale = await get_sale(db, sale_id)
    changes = crud.drop_required_nulls(Sale, data.model_dump(exclude_unset=True))
    before = snapshot(sale, AUDIT_FIELDS)

    old_client_id = sale.client_id
    old_receivable = balances.sale_receivable(sale)
    stock_held = sale.status != SaleStatus.CANCELLED.value

    new_client_id = changes.pop("client_id", None) or old_client_id
    if new_client_id != old_client_id:
        await _get_client(db, new_client_id)

    if changes.get("invoice_number"):
        changes["invoice_number"] = changes["invoice_number"].strip()
        if changes["invoice_number"] != sale.invoice_number:
            await crud.ensure_unique(db, Sale, "invoice_number", changes["invoice_number"], exclude_id=sale.id)
    elif "invoice_number" in changes:
        changes.pop("invoice_number")

    items = sale.items
    items_in = changes.pop("items", None)
    if items_in is not None:
        items = await _build_items(db, data.items)
        if stock_held:
            await inventory.restore_stock(db, item_lines(sale.items))
            await inventory.check_stock(db, item_lines(items))
            await inventory.deduct_stock(db, item_lines(items))
        sale.items = items

    for field, value in crud.coerce_numeric(Sale, changes).items():
        setattr(sale, field, value)
    sale.client_id = new_client_id
    _apply_totals(sale, items)

    if new_client_id != old_client_id:
        await db.execute(
            update(Payment).where(Payment.sale_id == sale.id).values(party_id=new_client_id)
        )
    await balances.adjust_client_balance(db, old_client_id, -old_receivable)
    await balances.adjust_client_balance(db, new_client_id, balances.sale_receivable(sale))

    create_audit_log(
        db,
        action=AuditAction.UPDATE.value,
        entity_type="sale",
        entity_id=sale.id,
        description=f"Sale {sale.invoice_number} updated",
        old_value=before,
        new_value=snapshot(sale, AUDIT_FIELDS),
    )
    await db.flush()
    return sale


async def delete_sale(db: AsyncSession, sale_id: int) -> None:
    sale = await get_sale(db, sale_id)
    if sale.status != SaleStatus.CANCELLED.value:
        await inventory.restore_stock(db, item_lines(sale.items))
    await balances.adjust_client_balance(db, sale.client_id, -balances.sale_receivable(sale))

    payments = (await db.execute(select(Payment).where(Payment.sale_id == sale.id))).scalars().all()
    for payment in payments:
        await db.delete(payment)

    create_audit_log(
        db,
        action=AuditAction.DELETE.value,
        entity_type="sale",
        entity_id=sale.id,
        description=f"Deleted sale {sale.invoice_number} with {len(payments)} payment(s)",
        old_value=snapshot(sale, AUDIT_FIELDS),
    )
    await db.delete(sale)
    await db.flush()


async def change_status(db: AsyncSession, sale_id: int, new_status: str) -> Sale:
    """
    Cancel or reactivate a sale. Other statuses follow the payments and
    cannot be set directly.
    """
    sale = await get_sale(db, sale_id)
    old_status = sale.status
    if new_status == old_status:
        return sale

    cancelled = SaleStatus.CANCELLED.value
    if new_status == cancelled:
        await inventory.restore_stock(db, item_lines(sale.items))
        await balances.adjust_client_balance(db, sale.client_id, -balances.sale_receivable(sale))
        sale.status = cancelled
    elif old_status == cancelled:
        await inventory.check_stock(db, item_lines(sale.items))
        await inventory.deduct_stock(db, item_lines(sale.items))
        sale.status = SaleStatus.PENDING.value
        balances.apply_sale_totals(sale)
        await balances.adjust_client_balance(db, sale.client_id, balances.sale_receivable(sale))
    else:
        raise HTTPException(
            status_code=400,
            detail="Sale status follows its payments; only cancelling or reactivating is allowed",
        )

    create_audit_log(
        db,
        action=AuditAction.STATUS_CHANGE.value,
        entity_type="sale",
        entity_id=sale.id,
        description=f"Sale {sale.invoice_number}: {old_status} -> {sale.status}",
        old_value={"status": old_status},
        new_value={"status": sale.status},
    )
    await db.flush()
    return sale


async def list_payments(db: AsyncSession, sale_id: int):
    await get_sale(db, sale_id)
    result = await db.execute(
        select(Payment).where(Payment.sale_id == sale_id).order_by(Payment.payment_date.asc(), Payment.id.asc())
    )
    return result.scalars().all()


async def add_payment(db: AsyncSession, sale_id: int, data: SalePaymentCreate) -> Payment:
    sale = await get_sale(db, sale_id)
    if sale.status == SaleStatus.CANCELLED.value:
        raise HTTPException(status_code=400, detail="Cannot add a payment to a cancelled sale")
    if to_decimal(data.amount) > to_decimal(sale.remaining_amount):
        raise HTTPException(
            status_code=400,
            detail=f"Payment amount exceeds remaining amount of {sale.remaining_amount}",
        )

    existing = await balances.count_payments(db, Payment.sale_id == sale.id)
    tranche_number = data.tranche_number or existing + 1
    payment = balances.record_payment(
        db,
        payment_date=data.payment_date,
        amount=data.amount,
        payment_method=data.payment_method,
        transaction_type=TransactionType.SALE.value,
        transaction_id=data.transaction_id,
        account_type=AccountType.RECEIVABLE.value,
        party_id=sale.client_id,
        party_type=PartyType.CLIENT.value,
        sale_id=sale.id,
        tranche_number=tranche_number,
        total_tranches=max(data.total_tranches or 1, tranche_number),
        notes=data.notes or f"Payment for sale: {sale.invoice_number}",
    )
    await balances.sync_sale(db, sale)

    create_audit_log(
        db,
        action=AuditAction.PAYMENT_RECEIVED.value,
        entity_type="sale",
        entity_id=sale.id,
        description=f"Received {payment.amount} for {sale.invoice_number}",
        new_value={"payment_id": payment.id, "total_paid": float(sale.total_paid), "status": sale.status},
    )
    await db.flush()
    return payment


async def get_stats(db: AsyncSession) -> dict:
    result = await db.execute(
        select(
            Sale.status,
            Sale.payment_status,
            func.count(Sale.id),
            func.coalesce(func.sum(Sale.grand_total), 0),
            func.coalesce(func.sum(Sale.total_paid), 0),
            func.coalesce(func.sum(Sale.remaining_amount), 0),
        ).group_by(Sale.status, Sale.payment_status)
    )
    stats = {
        "total_sales": 0,
        "total_revenue": 0.0,
        "total_paid": 0.0,
        "total_outstanding": 0.0,
        "by_status": {},
        "by_payment_status": {},
    }
    active_count = 0
    for status, pay_status, count, revenue, paid, remaining in result.all():
        stats["total_sales"] += count
        stats["by_status"][status] = stats["by_status"].get(status, 0) + count
        stats["by_payment_status"][pay_status] = stats["by_payment_status"].get(pay_status, 0) + count
        if status == SaleStatus.CANCELLED.value:
            continue
        active_count += count
        stats["total_revenue"] += float(revenue)
        stats["total_paid"] += float(paid)
        stats["total_outstanding"] += float(remaining)

    for key in ("total_revenue", "total_paid", "total_outstanding"):
        stats[key] = round(stats[key], 2)
    stats["average_sale_value"] = round(stats["total_revenue"] / active_count, 2) if active_count else 0.0
    return stats
