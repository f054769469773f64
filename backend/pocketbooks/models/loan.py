"""
Loan models

- LoanAccount: a bank loan with running principal / interest totals
- InterestPayment: one instalment against a loan, mirrored as an expense
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from pocketbooks.db.base import Base, TimestampMixin


class LoanAccount(TimestampMixin, Base):
    __tablename__ = "loan_accounts"

    id = Column(Integer, primary_key=True, index=True)

    bank_name = Column(String(100), nullable=False, index=True)
    account_number = Column(String(50), nullable=False, unique=True, index=True)
    loan_type = Column(String(50), nullable=False)

    principal_amount = Column(DECIMAL(12, 2), nullable=False)
    interest_rate = Column(DECIMAL(5, 2), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime)
    emi_amount = Column(DECIMAL(12, 2))

    total_interest_paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    total_principal_paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    outstanding_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))

    # active / closed / defaulted
    status = Column(String(20), nullable=False, default="active", index=True)
    notes = Column(Text)

    def __repr__(self):
        return f"<LoanAccount {self.account_number} {self.bank_name}>"


class InterestPayment(TimestampMixin, Base):
    __tablename__ = "interest_payments"

    id = Column(Integer, primary_key=True, index=True)
    loan_account_id = Column(Integer, ForeignKey("loan_accounts.id"), nullable=False, index=True)

    date = Column(DateTime, nullable=False, index=True)
    principal_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    interest_amount = Column(DECIMAL(12, 2), nullable=False)
    total_amount = Column(DECIMAL(12, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default="bank_transfer")
    notes = Column(String(500))

    # mirrored interest expense and its payment
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="SET NULL"), nullable=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="SET NULL"), nullable=True)

    loan_account = relationship("LoanAccount", lazy="selectin")

    def __repr__(self):
        return f"<InterestPayment {self.id} loan={self.loan_account_id} {self.total_amount}>"
