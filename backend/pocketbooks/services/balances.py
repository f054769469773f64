"""
Running balances kept in step with payments.

Every document that can be paid (sale, procurement, asset procurement,
standalone asset) stores ``total_paid``, ``remaining_amount`` and
``payment_status``. The ``sync_*`` functions recompute them from the
payments table and move the change in remaining amount onto the party
balance (client outstanding_balance / vendor outstanding_payable).
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.asset import Asset, AssetProcurement
from pocketbooks.models.client import Client
from pocketbooks.models.enums import ProcurementStatus, SaleStatus
from pocketbooks.models.payment import Payment
from pocketbooks.models.procurement import Procurement
from pocketbooks.models.sale import Sale
from pocketbooks.models.vendor import Vendor
from pocketbooks.services.calculations import (
    ZERO, money, payment_status, remaining_amount, sale_status, to_decimal,
)

logger = get_logger(__name__)


async def adjust_vendor_payable(db: AsyncSession, vendor_id: Optional[int], delta) -> None:
    delta = to_decimal(delta)
    if vendor_id is None or delta == ZERO:
        return
    vendor = await db.get(Vendor, vendor_id)
    if vendor is None:
        logger.warning(f"Vendor {vendor_id} not found, payable not adjusted by {delta}")
        return
    vendor.outstanding_payable = max(ZERO, money(to_decimal(vendor.outstanding_payable) + delta))


async def adjust_client_balance(db: AsyncSession, client_id: Optional[int], delta) -> None:
    delta = to_decimal(delta)
    if client_id is None or delta == ZERO:
        return
    client = await db.get(Client, client_id)
    if client is None:
        logger.warning(f"Client {client_id} not found, balance not adjusted by {delta}")
        return
    client.outstanding_balance = max(ZERO, money(to_decimal(client.outstanding_balance) + delta))


def record_payment(db: AsyncSession, **fields) -> Payment:
    """Add a payment to the session; amount is converted to Decimal."""
    fields["amount"] = money(fields["amount"])
    if not fields.get("payment_date"):
        fields["payment_date"] = datetime.utcnow()
    payment = Payment(**fields)
    db.add(payment)
    return payment


async def sum_payments(db: AsyncSession, *conditions) -> Decimal:
    result = await db.execute(select(func.coalesce(func.sum(Payment.amount), 0)).where(*conditions))
    return money(result.scalar() or 0)


async def count_payments(db: AsyncSession, *conditions) -> int:
    result = await db.execute(select(func.count(Payment.id)).where(*conditions))
    return result.scalar() or 0


def apply_paid(doc, total_paid, total) -> None:
    doc.total_paid = money(total_paid)
    doc.payment_status = payment_status(total_paid, total)
    doc.remaining_amount = remaining_amount(total, total_paid)


# ===== What each document owes its party =====

def sale_receivable(sale: Sale) -> Decimal:
    if sale.status == SaleStatus.CANCELLED.value:
        return ZERO
    return to_decimal(sale.remaining_amount)


def procurement_payable(procurement: Procurement) -> Decimal:
    if procurement.status == ProcurementStatus.CANCELLED.value:
        return ZERO
    return to_decimal(procurement.remaining_amount)


def asset_payable(asset: Asset) -> Decimal:
    if asset.vendor_id is None or asset.asset_procurement_id is not None:
        return ZERO
    return to_decimal(asset.remaining_amount)


# ===== Recalculation from payments =====

def apply_sale_totals(sale: Sale) -> None:
    """Refresh remaining / payment_status / status from sale.total_paid."""
    apply_paid(sale, sale.total_paid, sale.grand_total)
    sale.status = sale_status(sale.status, sale.total_paid, sale.grand_total)


def apply_procurement_totals(procurement: Procurement) -> None:
    apply_paid(procurement, procurement.total_paid, procurement.grand_total)


async def sync_sale(db: AsyncSession, sale: Sale) -> None:
    await db.flush()
    before = sale_receivable(sale)
    sale.total_paid = await sum_payments(db, Payment.sale_id == sale.id)
    apply_sale_totals(sale)
    await adjust_client_balance(db, sale.client_id, sale_receivable(sale) - before)


async def sync_procurement(db: AsyncSession, procurement: Procurement) -> None:
    await db.flush()
    before = procurement_payable(procurement)
    procurement.total_paid = await sum_payments(db, Payment.procurement_id == procurement.id)
    apply_procurement_totals(procurement)
    await adjust_vendor_payable(db, procurement.vendor_id, procurement_payable(procurement) - before)


async def sync_asset_procurement(db: AsyncSession, asset_procurement: AssetProcurement) -> None:
    await db.flush()
    before = to_decimal(asset_procurement.remaining_amount)
    paid = await sum_payments(db, Payment.asset_procurement_id == asset_procurement.id)
    apply_paid(asset_procurement, paid, asset_procurement.grand_total)
    await adjust_vendor_payable(
        db, asset_procurement.vendor_id, to_decimal(asset_procurement.remaining_amount) - before
    )


async def sync_asset(db: AsyncSession, asset: Asset) -> None:
    await db.flush()
    before = asset_payable(asset)
    paid = await sum_payments(db, Payment.asset_id == asset.id)
    apply_paid(asset, paid, asset.purchase_price)
    await adjust_vendor_payable(db, asset.vendor_id, asset_payable(asset) - before)


async def sync_payment_target(db: AsyncSession, payment: Payment) -> bool:
    """
    Re-sync whatever document the payment is linked to.
    Returns False when the payment is not linked to any payable document.
    """
    synced = False
    if payment.sale_id is not None:
        sale = await db.get(Sale, payment.sale_id)
        if sale is not None:
            await sync_sale(db, sale)
            synced = True
    if payment.procurement_id is not None:
        procurement = await db.get(Procurement, payment.procurement_id)
        if procurement is not None:
            await sync_procurement(db, procurement)
            synced = True
    if payment.asset_procurement_id is not None:
        asset_procurement = await db.get(AssetProcurement, payment.asset_procurement_id)
        if asset_procurement is not None:
            await sync_asset_procurement(db, asset_procurement)
            synced = True
    if payment.asset_id is not None:
        asset = await db.get(Asset, payment.asset_id)
        if asset is not None:
            await sync_asset(db, asset)
            synced = True
    return synced
