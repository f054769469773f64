"""
Audit log - append-only record of business actions.
Written inside the same transaction as the change it describes.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON
from pocketbooks.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    # CREATE / UPDATE / DELETE / STATUS_CHANGE / PAYMENT_RECEIVED / STOCK_ADJUSTMENT
    action = Column(String(30), nullable=False, index=True)

    # sale, procurement, payment, finished_good, ...
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(Integer, index=True)

    description = Column(String(500))
    old_value = Column(JSON)
    new_value = Column(JSON)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity_type}:{self.entity_id}>"
