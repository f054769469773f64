"""
Loan service

An interest payment adds to the loan's paid totals, reduces the
outstanding amount (closing the loan at zero) and is mirrored as an
``interest`` expense with its payment.
"""

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.core.logging_config import get_logger
from pocketbooks.models.enums import (
    AuditAction, ExpenseCategory, LoanAccountStatus,
)
from pocketbooks.models.expense import Expense
from pocketbooks.models.loan import InterestPayment, LoanAccount
from pocketbooks.models.payment import Payment
from pocketbooks.schemas.loan import InterestPaymentCreate, InterestPaymentUpdate
from pocketbooks.services import crud, expenses
from pocketbooks.services.audit import create_audit_log, snapshot
from pocketbooks.services.calculations import ZERO, money, to_decimal

logger = get_logger(__name__)

AUDIT_FIELDS = ("loan_account_id", "date", "principal_amount", "interest_amount", "total_amount")


async def delete_loan_account(db: AsyncSession, loan_account_id: int) -> None:
    await crud.get_by_id(db, LoanAccount, loan_account_id)
    payments = await crud.count_where(db, InterestPayment, InterestPayment.loan_account_id == loan_account_id)
    if payments:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete loan account with {payments} interest payment(s)",
        )
    await crud.delete(db, LoanAccount, loan_account_id)


def _apply_to_loan(loan: LoanAccount, principal, interest, sign: int = 1) -> None:
    """Add (sign=1) or take back (sign=-1) one instalment on the loan totals."""
    principal = to_decimal(principal) * sign
    interest = to_decimal(interest) * sign
    loan.total_interest_paid = max(ZERO, money(to_decimal(loan.total_interest_paid) + interest))
    loan.total_principal_paid = max(ZERO, money(to_decimal(loan.total_principal_paid) + principal))
    loan.outstanding_amount = max(ZERO, money(to_decimal(loan.outstanding_amount) - principal))

    if loan.outstanding_amount == ZERO:
        loan.status = LoanAccountStatus.CLOSED.value
    elif loan.status == LoanAccountStatus.CLOSED.value:
        loan.status = LoanAccountStatus.ACTIVE.value


def _expense_fields(loan: LoanAccount, interest_payment: InterestPayment) -> dict:
    return {
        "date": interest_payment.date,
        "category": ExpenseCategory.INTEREST.value,
        "description": f"Interest payment - {loan.bank_name} ({loan.account_number})",
        "amount": interest_payment.interest_amount,
        "payment_method": interest_payment.payment_method,
        "notes": interest_payment.notes,
    }


async def create_interest_payment(db: AsyncSession, data: InterestPaymentCreate) -> InterestPayment:
    loan = await crud.get_by_id(db, LoanAccount, data.loan_account_id)
    if loan.status == LoanAccountStatus.CLOSED.value:
        raise HTTPException(status_code=400, detail="Loan account is closed")

    fields = data.model_dump()
    interest_payment = InterestPayment(**crud.coerce_numeric(InterestPayment, fields))
    interest_payment.total_amount = money(
        to_decimal(interest_payment.principal_amount) + to_decimal(interest_payment.interest_amount)
    )
    db.add(interest_payment)
    await db.flush()

    _apply_to_loan(loan, interest_payment.principal_amount, interest_payment.interest_amount)

    expense = await expenses.create_expense(db, _expense_fields(loan, interest_payment))
    interest_payment.expense_id = expense.id
    interest_payment.payment_id = expense.payment_id

    create_audit_log(
        db,
        action=AuditAction.CREATE.value,
        entity_type="interest_payment",
        entity_id=interest_payment.id,
        description=f"Loan {loan.account_number}: interest {interest_payment.interest_amount}, "
                    f"principal {interest_payment.principal_amount}",
        new_value=snapshot(interest_payment, AUDIT_FIELDS),
    )
    await db.flush()
    return interest_payment


async def update_interest_payment(
    db: AsyncSession, interest_payment_id: int, data: InterestPaymentUpdate
) -> InterestPayment:
    interest_payment = await crud.get_by_id(db, InterestPayment, interest_payment_id)
    loan = await crud.get_by_id(db, LoanAccount, interest_payment.loan_account_id)
    before = snapshot(interest_payment, AUDIT_FIELDS)

    _apply_to_loan(loan, interest_payment.principal_amount, interest_payment.interest_amount, sign=-1)

    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None or k == "notes"}
    for field, value in crud.coerce_numeric(InterestPayment, changes).items():
        setattr(interest_payment, field, value)
    interest_payment.total_amount = money(
        to_decimal(interest_payment.principal_amount) + to_decimal(interest_payment.interest_amount)
    )

    _apply_to_loan(loan, interest_payment.principal_amount, interest_payment.interest_amount)

    expense_fields = _expense_fields(loan, interest_payment)
    if interest_payment.expense_id and await db.get(Expense, interest_payment.expense_id) is not None:
        expense = await expenses.update_expense(db, interest_payment.expense_id, expense_fields)
    else:
        expense = await expenses.create_expense(db, expense_fields)
        interest_payment.expense_id = expense.id
    interest_payment.payment_id = expense.payment_id

    create_audit_log(
        db,
        action=AuditAction.UPDATE.value,
        entity_type="interest_payment",
        entity_id=interest_payment.id,
        old_value=before,
        new_value=snapshot(interest_payment, AUDIT_FIELDS),
    )
    await db.flush()
    return interest_payment


async def delete_interest_payment(db: AsyncSession, interest_payment_id: int) -> None:
    interest_payment = await crud.get_by_id(db, InterestPayment, interest_payment_id)
    loan = await db.get(LoanAccount, interest_payment.loan_account_id)
    if loan is not None:
        _apply_to_loan(loan, interest_payment.principal_amount, interest_payment.interest_amount, sign=-1)

    if interest_payment.payment_id:
        payment = await db.get(Payment, interest_payment.payment_id)
        if payment is not None:
            await db.delete(payment)
    if interest_payment.expense_id:
        expense = await db.get(Expense, interest_payment.expense_id)
        if expense is not None:
            await db.delete(expense)

    create_audit_log(
        db,
        action=AuditAction.DELETE.value,
        entity_type="interest_payment",
        entity_id=interest_payment.id,
        old_value=snapshot(interest_payment, AUDIT_FIELDS),
    )
    await db.delete(interest_payment)
    await db.flush()
