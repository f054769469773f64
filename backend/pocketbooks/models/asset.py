"""
Asset models

- AssetProcurement: a purchase invoice that produces one Asset per unit
- Asset: a fixed asset with purchase price, current value and payment state
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from pocketbooks.db.base import Base, TimestampMixin


class AssetProcurement(TimestampMixin, Base):
    """Purchase of fixed assets from a vendor"""
    __tablename__ = "asset_procurements"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    procurement_date = Column(DateTime, nullable=False)

    total_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    gst_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    grand_total = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    total_paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    remaining_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    payment_status = Column(String(20), nullable=False, default="unpaid")

    invoice_number = Column(String(50))
    notes = Column(Text)
    status = Column(String(20), nullable=False, default="received")

    vendor = relationship("Vendor", lazy="selectin")
    items = relationship(
        "AssetProcurementItem",
        back_populates="asset_procurement",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="AssetProcurementItem.id",
    )

    def __repr__(self):
        return f"<AssetProcurement {self.id} vendor={self.vendor_id} {self.grand_total}>"


class AssetProcurementItem(Base):
    __tablename__ = "asset_procurement_items"

    id = Column(Integer, primary_key=True, index=True)
    asset_procurement_id = Column(
        Integer, ForeignKey("asset_procurements.id", ondelete="CASCADE"), nullable=False, index=True
    )

    asset_name = Column(String(100), nullable=False)
    description = Column(String(500))
    category = Column(String(30), nullable=False, default="other")
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(DECIMAL(12, 2), nullable=False)
    amount = Column(DECIMAL(12, 2), nullable=False)

    asset_procurement = relationship("AssetProcurement", back_populates="items")


class Asset(TimestampMixin, Base):
    """Fixed asset

    Payment totals are derived from payments with ``asset_id`` pointing here
    and are recalculated nightly by the scheduler as well. Assets bought on an
    asset procurement owe the vendor through that invoice, not individually.
    """
    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500))
    category = Column(String(30), nullable=False, default="other", index=True)
    serial_number = Column(String(100))

    purchase_date = Column(DateTime, nullable=False)
    purchase_price = Column(DECIMAL(12, 2), nullable=False)
    current_value = Column(DECIMAL(12, 2), nullable=False)

    location = Column(String(100))
    # active / repair / retired / disposed
    status = Column(String(20), nullable=False, default="active", index=True)

    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=True, index=True)
    asset_procurement_id = Column(
        Integer, ForeignKey("asset_procurements.id", ondelete="SET NULL"), nullable=True, index=True
    )

    gst_enabled = Column(Boolean, nullable=False, default=False)
    gst_percentage = Column(DECIMAL(5, 2), nullable=False, default=Decimal("0"))
    gst_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))

    total_paid = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    remaining_amount = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    payment_status = Column(String(20), nullable=False, default="unpaid")

    notes = Column(Text)

    vendor = relationship("Vendor", lazy="selectin")

    def __repr__(self):
        return f"<Asset {self.id}: {self.name} ({self.status})>"

    @property
    def depreciation(self) -> Decimal:
        return max(Decimal("0"), (self.purchase_price or Decimal("0")) - (self.current_value or Decimal("0")))
