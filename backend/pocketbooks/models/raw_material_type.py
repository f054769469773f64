from sqlalchemy import Column, Integer, String, Boolean
from pocketbooks.db.base import Base, TimestampMixin


class RawMaterialType(TimestampMixin, Base):
    """Catalogue of raw material kinds a vendor can specialise in"""
    __tablename__ = "raw_material_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(String(200))
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<RawMaterialType {self.name}>"
