"""
Payment model - every money movement in or out.

transaction_type:
- sale: money received from a client (receivable)
- purchase: money paid to a vendor for stock or assets (payable)
- expense: money paid for an operating expense (payable, no party)

party_id points at a client or a vendor depending on party_type, so it is
not a foreign key.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, DECIMAL
from pocketbooks.db.base import Base, TimestampMixin


class Payment(TimestampMixin, Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)

    payment_date = Column(DateTime, nullable=False, index=True)
    amount = Column(DECIMAL(12, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default="cash")

    transaction_type = Column(String(20), nullable=False, index=True)
    transaction_id = Column(String(100))
    account_type = Column(String(20), nullable=False)

    party_id = Column(Integer, nullable=True, index=True)
    party_type = Column(String(20), nullable=True, index=True)

    # at most one of these links is set
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="SET NULL"), nullable=True, index=True)
    procurement_id = Column(Integer, ForeignKey("procurements.id", ondelete="SET NULL"), nullable=True, index=True)
    procurement_type = Column(String(20))
    asset_id = Column(Integer, ForeignKey("assets.id", ondelete="SET NULL"), nullable=True, index=True)
    asset_procurement_id = Column(
        Integer, ForeignKey("asset_procurements.id", ondelete="SET NULL"), nullable=True, index=True
    )
    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="SET NULL"), nullable=True, index=True)

    tranche_number = Column(Integer, nullable=False, default=1)
    total_tranches = Column(Integer, nullable=False, default=1)
    notes = Column(String(500))

    def __repr__(self):
        return f"<Payment {self.id} {self.transaction_type} {self.amount}>"
