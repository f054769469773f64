"""
Expense service. Every expense is mirrored by one ``expense`` payment kept
in step with the expense's amount, date and method.
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.enums import AccountType, TransactionType
from pocketbooks.models.expense import Expense
from pocketbooks.models.loan import InterestPayment
from pocketbooks.models.payment import Payment
from pocketbooks.services import balances, crud
from pocketbooks.services.calculations import money

logger = get_logger(__name__)


def payment_note(description: str, receipt_number: Optional[str]) -> str:
    note = f"Expense: {description}"
    if receipt_number:
        note += f" (Receipt: {receipt_number})"
    return note


def _record_expense_payment(db: AsyncSession, expense: Expense) -> Payment:
    return balances.record_payment(
        db,
        payment_date=expense.date,
        amount=expense.amount,
        payment_method=expense.payment_method,
        transaction_type=TransactionType.EXPENSE.value,
        account_type=AccountType.PAYABLE.value,
        expense_id=expense.id,
        notes=payment_note(expense.description, expense.receipt_number),
    )


async def create_expense(db: AsyncSession, data: dict) -> Expense:
    expense = await crud.create(db, Expense, data)
    payment = _record_expense_payment(db, expense)
    await db.flush()
    expense.payment_id = payment.id
    await db.flush()
    logger.info(f"Recorded expense {expense.id}: {expense.category} {expense.amount}")
    return expense


async def update_expense(db: AsyncSession, expense_id: int, data: dict) -> Expense:
    expense = await crud.update(db, Expense, expense_id, data)
    payment = await db.get(Payment, expense.payment_id) if expense.payment_id else None
    if payment is None:
        payment = _record_expense_payment(db, expense)
        await db.flush()
        expense.payment_id = payment.id
    else:
        payment.amount = money(expense.amount)
        payment.payment_date = expense.date
        payment.payment_method = expense.payment_method
        payment.notes = payment_note(expense.description, expense.receipt_number)
    await db.flush()
    return expense


async def delete_expense(db: AsyncSession, expense_id: int) -> None:
    expense = await crud.get_by_id(db, Expense, expense_id)
    linked = await crud.count_where(db, InterestPayment, InterestPayment.expense_id == expense.id)
    if linked:
        raise HTTPException(
            status_code=400,
            detail="This expense belongs to an interest payment; delete the interest payment instead",
        )
    payments = (await db.execute(select(Payment).where(Payment.expense_id == expense.id))).scalars().all()
    for payment in payments:
        await db.delete(payment)
    await db.delete(expense)
    await db.flush()


def _month_start(d: datetime) -> datetime:
    return datetime(d.year, d.month, 1)


async def _sum_between(db: AsyncSession, start: datetime, end: datetime) -> float:
    result = await db.execute(
        select(func.coalesce(func.sum(Expense.amount), 0)).where(Expense.date >= start, Expense.date < end)
    )
    return round(float(result.scalar() or 0), 2)


async def get_stats(db: AsyncSession) -> dict:
    count, total = (await db.execute(
        select(func.count(Expense.id), func.coalesce(func.sum(Expense.amount), 0))
    )).one()
    total = float(total or 0)
    by_category = await db.execute(
        select(Expense.category, func.coalesce(func.sum(Expense.amount), 0)).group_by(Expense.category)
    )

    this_month = _month_start(datetime.utcnow())
    last_month = _month_start(this_month - timedelta(days=1))
    next_month = _month_start(this_month.replace(day=28) + timedelta(days=4))

    return {
        "total_amount": round(total, 2),
        "count": count or 0,
        "average_amount": round(total / count, 2) if count else 0.0,
        "by_category": {c: round(float(a), 2) for c, a in by_category.all()},
        "this_month": await _sum_between(db, this_month, next_month),
        "last_month": await _sum_between(db, last_month, this_month),
    }
