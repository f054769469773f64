"""
Vendor model - suppliers of raw materials, trading goods and assets.
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, DECIMAL, JSON
from pocketbooks.db.base import Base, TimestampMixin


class Vendor(TimestampMixin, Base):
    """Vendor - seller side of a procurement"""
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(100), nullable=False, index=True)
    contact_person = Column(String(100))
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(20))
    address = Column(JSON, default=dict)

    specialty = Column(String(200))
    # names from the raw material type catalogue
    raw_material_types = Column(JSON, default=list)

    status = Column(String(20), nullable=False, default="active", index=True)
    gst_number = Column(String(20))

    # what we still owe the vendor (procurements + assets)
    outstanding_payable = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))

    def __repr__(self):
        return f"<Vendor {self.id}: {self.name}>"
