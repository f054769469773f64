"""
Procurement model - purchase orders for raw materials and trading goods.

One table serves both kinds; ``procurement_type`` says which inventory
table the item lines point at.

Money flow:
- grand_total = total_amount + gst_amount
- remaining_amount is added to the vendor's outstanding payable
- payments against the procurement reduce it again
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL, UniqueConstraint
from sqlalchemy.orm import relationship
from pocketbooks.db.base import Base, TimestampMixin


class Procurement(TimestampMixin, Base):
    """Purchase of stock from a vendor"""
    __tablename__ = "procurements"
    __table_args__ = (
        UniqueConstraint("vendor_id", "invoice_number", name="uq_procurement_vendor_invoice"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # raw_material / trading_good
    procurement_type = Column(String(20), nullable=False, index=True)

    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    procurement_date = Column(DateTime, nullable=False)

    total_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    gst_percentage = Column(DECIMAL(5, 2), nullable=False, default=Decimal("0"))
    gst_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    grand_total = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    total_paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    remaining_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    payment_status = Column(String(20), nullable=False, default="unpaid", index=True)

    # ordered / received / completed / cancelled
    status = Column(String(20), nullable=False, default="ordered", index=True)

    invoice_number = Column(String(50), index=True)
    payment_terms = Column(String(100))
    notes = Column(Text)

    received_date = Column(DateTime)
    expected_delivery_date = Column(DateTime)
    actual_delivery_date = Column(DateTime)

    vendor = relationship("Vendor", lazy="selectin")
    items = relationship(
        "ProcurementItem",
        back_populates="procurement",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProcurementItem.id",
    )

    def __repr__(self):
        return f"<Procurement {self.id} {self.procurement_type} {self.status} {self.grand_total}>"

    @property
    def stock_received(self) -> bool:
        """Stock has been booked into inventory for this procurement"""
        return self.status in ("received", "completed")


class ProcurementItem(Base):
    """One line of a procurement"""
    __tablename__ = "procurement_items"

    id = Column(Integer, primary_key=True, index=True)
    procurement_id = Column(Integer, ForeignKey("procurements.id", ondelete="CASCADE"), nullable=False, index=True)

    # exactly one of these is set, matching the parent's procurement_type
    raw_material_id = Column(Integer, ForeignKey("raw_materials.id"), nullable=True, index=True)
    trading_good_id = Column(Integer, ForeignKey("trading_goods.id"), nullable=True, index=True)

    # snapshot of the item name at purchase time
    item_name = Column(String(100))

    quantity = Column(DECIMAL(14, 4), nullable=False)
    unit_price = Column(DECIMAL(14, 4), nullable=False)
    amount = Column(DECIMAL(12, 2), nullable=False)

    procurement = relationship("Procurement", back_populates="items")

    @property
    def item_id(self):
        return self.raw_material_id if self.raw_material_id is not None else self.trading_good_id

    def __repr__(self):
        return f"<ProcurementItem {self.item_name} x{self.quantity} @ {self.unit_price}>"
