"""
Sale model - invoices raised against clients.

Item lines point at one of the three inventory tables (item_type says
which), so item_id is not a foreign key. The item name is snapshotted
when the sale is written.
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from pocketbooks.db.base import Base, TimestampMixin


class Sale(TimestampMixin, Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    sale_date = Column(DateTime, nullable=False, index=True)

    invoice_number = Column(String(50), nullable=False, unique=True, index=True)

    subtotal = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    discount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    gst_percentage = Column(DECIMAL(5, 2), nullable=False, default=Decimal("0"))
    gst_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    grand_total = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    total_paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    remaining_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    payment_status = Column(String(20), nullable=False, default="unpaid", index=True)

    # pending / partially_paid / completed / cancelled
    status = Column(String(20), nullable=False, default="pending", index=True)

    payment_terms = Column(String(100))
    expected_delivery_date = Column(DateTime)
    actual_delivery_date = Column(DateTime)
    notes = Column(Text)

    client = relationship("Client", lazy="selectin")
    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SaleItem.id",
    )

    def __repr__(self):
        return f"<Sale {self.invoice_number} {self.grand_total} ({self.status})>"


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)

    item_id = Column(Integer, nullable=False)
    # raw_material / trading_good / finished_good
    item_type = Column(String(20), nullable=False)
    item_name = Column(String(100))

    quantity = Column(DECIMAL(14, 4), nullable=False)
    unit_price = Column(DECIMAL(12, 2), nullable=False)
    total = Column(DECIMAL(12, 2), nullable=False)

    sale = relationship("Sale", back_populates="items")

    def __repr__(self):
        return f"<SaleItem {self.item_type}:{self.item_id} x{self.quantity}>"
