"""
Client model - customers we sell to.
Outstanding balance is maintained by the sale and payment services.
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, DECIMAL, JSON
from pocketbooks.db.base import Base, TimestampMixin


class Client(TimestampMixin, Base):
    """Client - buyer side of a sale"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(100), nullable=False, index=True)
    contact_person = Column(String(100))
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(20))

    # {street, city, state, postal_code, country}
    address = Column(JSON, default=dict)

    status = Column(String(20), nullable=False, default="active", index=True)
    gst_number = Column(String(20))

    # what the client still owes us across all open sales
    outstanding_balance = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))

    def __repr__(self):
        return f"<Client {self.id}: {self.name}>"
