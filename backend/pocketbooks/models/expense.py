from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, DECIMAL
from pocketbooks.db.base import Base, TimestampMixin


class Expense(TimestampMixin, Base):
    """Operating expense. Every expense is mirrored by an ``expense`` payment."""
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)

    date = Column(DateTime, nullable=False, index=True)
    category = Column(String(30), nullable=False, index=True)
    description = Column(String(200), nullable=False)
    amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    payment_method = Column(String(20), nullable=False, default="cash")
    receipt_number = Column(String(50))
    notes = Column(String(500))

    # the mirrored payment; plain integer because payments point back at expenses
    payment_id = Column(Integer, nullable=True, index=True)

    def __repr__(self):
        return f"<Expense {self.id} {self.category} {self.amount}>"
