"""
Payment service

Payments linked to a sale, procurement, asset procurement or asset re-sync
that document (and through it the party balance). Vendor purchase
payments linked to nothing reduce the vendor payable directly.
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, Tuple

from fastapi import HTTPException
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.asset import Asset, AssetProcurement
from pocketbooks.models.client import Client
from pocketbooks.models.enums import (
    AuditAction, PartyType, ProcurementStatus, SaleStatus, TransactionType,
)
from pocketbooks.models.expense import Expense
from pocketbooks.models.loan import InterestPayment
from pocketbooks.models.payment import Payment
from pocketbooks.models.procurement import Procurement
from pocketbooks.models.sale import Sale
from pocketbooks.models.vendor import Vendor
from pocketbooks.schemas.payment import PaymentCreate, PaymentUpdate
from pocketbooks.services import balances, crud
from pocketbooks.services.audit import create_audit_log, snapshot
from pocketbooks.services.calculations import to_decimal

logger = get_logger(__name__)

AUDIT_FIELDS = ("amount", "payment_date", "payment_method", "transaction_type", "party_id", "party_type")


async def party_names(db: AsyncSession, payments: Iterable[Payment]) -> Dict[Tuple[str, int], str]:
    """{(party_type, party_id): name} for the clients and vendors paid"""
    client_ids = {p.party_id for p in payments if p.party_type == PartyType.CLIENT.value and p.party_id}
    vendor_ids = {p.party_id for p in payments if p.party_type == PartyType.VENDOR.value and p.party_id}
    names = {}
    if client_ids:
        rows = await db.execute(select(Client.id, Client.name).where(Client.id.in_(client_ids)))
        names.update({(PartyType.CLIENT.value, pid): name for pid, name in rows.all()})
    if vendor_ids:
        rows = await db.execute(select(Vendor.id, Vendor.name).where(Vendor.id.in_(vendor_ids)))
        names.update({(PartyType.VENDOR.value, pid): name for pid, name in rows.all()})
    return names


def _is_plain_vendor_purchase(payment: Payment) -> bool:
    return (
        payment.transaction_type == TransactionType.PURCHASE.value
        and payment.party_type == PartyType.VENDOR.value
        and payment.party_id is not None
    )


async def _check_party(db: AsyncSession, party_type, party_id) -> None:
    if party_id is None:
        return
    model = Client if party_type == PartyType.CLIENT.value else Vendor
    if await db.get(model, party_id) is None:
        raise HTTPException(status_code=404, detail=f"{crud.model_label(model)} not found")


async def _resolve_links(db: AsyncSession, fields: dict) -> None:
    """Validate linked documents and point the party at their owner."""
    amount = to_decimal(fields["amount"])

    if fields.get("sale_id") is not None:
        sale = await db.get(Sale, fields["sale_id"])
        if sale is None:
            raise HTTPException(status_code=404, detail="Sale not found")
        if fields["transaction_type"] != TransactionType.SALE.value:
            raise HTTPException(status_code=400, detail="Payments against a sale must be sale transactions")
        if sale.status == SaleStatus.CANCELLED.value:
            raise HTTPException(status_code=400, detail="Cannot add a payment to a cancelled sale")
        if amount > to_decimal(sale.remaining_amount):
            raise HTTPException(status_code=400, detail="Payment amount exceeds remaining amount")
        fields["party_id"], fields["party_type"] = sale.client_id, PartyType.CLIENT.value

    if fields.get("procurement_id") is not None:
        procurement = await db.get(Procurement, fields["procurement_id"])
        if procurement is None or procurement.procurement_type != fields.get("procurement_type"):
            raise HTTPException(status_code=404, detail="Procurement not found")
        if fields["transaction_type"] != TransactionType.PURCHASE.value:
            raise HTTPException(status_code=400, detail="Payments against a procurement must be purchase transactions")
        if procurement.status == ProcurementStatus.CANCELLED.value:
            raise HTTPException(status_code=400, detail="Cannot add a payment to a cancelled procurement")
        if amount > to_decimal(procurement.remaining_amount):
            raise HTTPException(status_code=400, detail="Payment amount exceeds remaining amount")
        fields["party_id"], fields["party_type"] = procurement.vendor_id, PartyType.VENDOR.value

    if fields.get("asset_procurement_id") is not None:
        asset_procurement = await db.get(AssetProcurement, fields["asset_procurement_id"])
        if asset_procurement is None:
            raise HTTPException(status_code=404, detail="Asset procurement not found")
        if amount > to_decimal(asset_procurement.remaining_amount):
            raise HTTPException(status_code=400, detail="Payment amount exceeds remaining amount")
        fields["party_id"], fields["party_type"] = asset_procurement.vendor_id, PartyType.VENDOR.value

    if fields.get("asset_id") is not None:
        asset = await db.get(Asset, fields["asset_id"])
        if asset is None:
            raise HTTPException(status_code=404, detail="Asset not found")
        if amount > to_decimal(asset.remaining_amount):
            raise HTTPException(status_code=400, detail="Payment amount exceeds remaining amount")
        if asset.vendor_id is not None:
            fields["party_id"], fields["party_type"] = asset.vendor_id, PartyType.VENDOR.value

    if fields.get("expense_id") is not None and await db.get(Expense, fields["expense_id"]) is None:
        raise HTTPException(status_code=404, detail="Expense not found")


async def create_payment(db: AsyncSession, data: PaymentCreate) -> Payment:
    fields = data.model_dump()
    await _check_party(db, fields.get("party_type"), fields.get("party_id"))
    await _resolve_links(db, fields)

    payment = balances.record_payment(db, **fields)
    await db.flush()

    synced = await balances.sync_payment_target(db, payment)
    if not synced and _is_plain_vendor_purchase(payment):
        await balances.adjust_vendor_payable(db, payment.party_id, -payment.amount)

    create_audit_log(
        db,
        action=(AuditAction.PAYMENT_RECEIVED if payment.sale_id else AuditAction.CREATE).value,
        entity_type="payment",
        entity_id=payment.id,
        description=f"{payment.transaction_type} payment of {payment.amount}",
        new_value=snapshot(payment, AUDIT_FIELDS),
    )
    await db.flush()
    return payment


async def update_payment(db: AsyncSession, payment_id: int, data: PaymentUpdate) -> Payment:
    payment = await crud.get_by_id(db, Payment, payment_id)
    changes = crud.drop_required_nulls(Payment, data.model_dump(exclude_unset=True))
    before = snapshot(payment, AUDIT_FIELDS)
    old_amount = to_decimal(payment.amount)

    if payment.expense_id is not None and (
        ("amount" in changes and to_decimal(changes["amount"]) != old_amount)
        or ("payment_date" in changes and changes["payment_date"] != payment.payment_date)
    ):
        raise HTTPException(
            status_code=400,
            detail="This payment belongs to an expense; update the expense instead",
        )

    if "amount" in changes:
        increase = to_decimal(changes["amount"]) - old_amount
        if increase > 0:
            target = None
            if payment.sale_id is not None:
                target = await db.get(Sale, payment.sale_id)
            elif payment.procurement_id is not None:
                target = await db.get(Procurement, payment.procurement_id)
            elif payment.asset_procurement_id is not None:
                target = await db.get(AssetProcurement, payment.asset_procurement_id)
            elif payment.asset_id is not None:
                target = await db.get(Asset, payment.asset_id)
            if target is not None and increase > to_decimal(target.remaining_amount):
                raise HTTPException(status_code=400, detail="Payment amount exceeds remaining amount")

    for field, value in crud.coerce_numeric(Payment, changes).items():
        setattr(payment, field, value)
    if payment.tranche_number > payment.total_tranches:
        raise HTTPException(status_code=400, detail="tranche_number cannot exceed total_tranches")
    await db.flush()

    synced = await balances.sync_payment_target(db, payment)
    if not synced and _is_plain_vendor_purchase(payment):
        await balances.adjust_vendor_payable(db, payment.party_id, old_amount - to_decimal(payment.amount))

    create_audit_log(
        db,
        action=AuditAction.UPDATE.value,
        entity_type="payment",
        entity_id=payment.id,
        old_value=before,
        new_value=snapshot(payment, AUDIT_FIELDS),
    )
    await db.flush()
    return payment


async def delete_payment(db: AsyncSession, payment_id: int) -> None:
    payment = await crud.get_by_id(db, Payment, payment_id)
    before = snapshot(payment, AUDIT_FIELDS)

    await db.execute(update(Expense).where(Expense.payment_id == payment.id).values(payment_id=None))
    await db.execute(
        update(InterestPayment).where(InterestPayment.payment_id == payment.id).values(payment_id=None)
    )
    await db.delete(payment)
    await db.flush()

    synced = await balances.sync_payment_target(db, payment)
    if not synced and _is_plain_vendor_purchase(payment):
        await balances.adjust_vendor_payable(db, payment.party_id, payment.amount)

    create_audit_log(
        db,
        action=AuditAction.DELETE.value,
        entity_type="payment",
        entity_id=payment_id,
        old_value=before,
    )
    await db.flush()


async def get_stats(db: AsyncSession) -> dict:
    totals = (await db.execute(
        select(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
    )).one()
    count, total = totals[0] or 0, float(totals[1] or 0)

    by_type = await db.execute(
        select(Payment.transaction_type, func.coalesce(func.sum(Payment.amount), 0)).group_by(Payment.transaction_type)
    )
    by_method = await db.execute(
        select(Payment.payment_method, func.coalesce(func.sum(Payment.amount), 0)).group_by(Payment.payment_method)
    )

    today = datetime.utcnow().date()
    start = today - timedelta(days=29)
    day = func.date(Payment.payment_date)
    daily_rows = await db.execute(
        select(day, func.coalesce(func.sum(Payment.amount), 0), func.count(Payment.id))
        .where(Payment.payment_date >= datetime.combine(start, datetime.min.time()))
        .group_by(day)
    )
    daily = {str(d): (float(a), c) for d, a, c in daily_rows.all()}
    trend = []
    for offset in range(30):
        key = (start + timedelta(days=offset)).isoformat()
        amount, n = daily.get(key, (0.0, 0))
        trend.append({"date": key, "amount": round(amount, 2), "count": n})

    return {
        "total_amount": round(total, 2),
        "count": count,
        "average_amount": round(total / count, 2) if count else 0.0,
        "by_transaction_type": {t: round(float(a), 2) for t, a in by_type.all()},
        "by_payment_method": {m: round(float(a), 2) for m, a in by_method.all()},
        "daily_trend": trend,
    }
