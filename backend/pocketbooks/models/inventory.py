"""
Inventory models

- RawMaterial: bought from vendors, consumed by production
- TradingGood: bought from vendors and resold as is
- FinishedGood: produced in-house from a bill of materials
"""

from decimal import Decimal
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from pocketbooks.db.base import Base, TimestampMixin


class RawMaterial(TimestampMixin, Base):
    """Raw material stock item"""
    __tablename__ = "raw_materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    unit = Column(String(20), nullable=False, default="kg")

    current_stock = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))
    reorder_level = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))

    # weighted average cost per unit
    cost_price = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))

    intended_for_id = Column(Integer, ForeignKey("finished_goods.id", ondelete="SET NULL"), nullable=True)
    last_procurement_date = Column(DateTime)

    intended_for = relationship("FinishedGood", foreign_keys=[intended_for_id], lazy="selectin")

    def __repr__(self):
        return f"<RawMaterial {self.id}: {self.name} stock={self.current_stock}>"

    @property
    def is_low_stock(self) -> bool:
        return (self.current_stock or 0) <= (self.reorder_level or 0)


class TradingGood(TimestampMixin, Base):
    """Goods bought and resold without processing"""
    __tablename__ = "trading_goods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    sku = Column(String(50), nullable=False, unique=True, index=True)
    unit = Column(String(20), nullable=False, default="piece")

    current_stock = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))
    reorder_level = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))
    cost_price = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))
    selling_price = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0"))

    last_procurement_date = Column(DateTime)

    def __repr__(self):
        return f"<TradingGood {self.sku}: {self.name}>"

    @property
    def is_low_stock(self) -> bool:
        return (self.current_stock or 0) <= (self.reorder_level or 0)


class FinishedGood(TimestampMixin, Base):
    """Product manufactured from raw materials"""
    __tablename__ = "finished_goods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    sku = Column(String(50), nullable=False, unique=True, index=True)
    unit = Column(String(20), nullable=False, default="piece")

    current_stock = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))
    manufacturing_cost = Column(DECIMAL(14, 4), nullable=False, default=Decimal("0"))
    selling_price = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0"))

    last_manufacture_date = Column(DateTime)

    # bill of materials
    components = relationship(
        "FinishedGoodComponent",
        back_populates="finished_good",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="FinishedGoodComponent.id",
    )

    def __repr__(self):
        return f"<FinishedGood {self.sku}: {self.name}>"


class FinishedGoodComponent(Base):
    """One raw material line of a finished good's bill of materials"""
    __tablename__ = "finished_good_components"

    id = Column(Integer, primary_key=True, index=True)
    finished_good_id = Column(Integer, ForeignKey("finished_goods.id", ondelete="CASCADE"), nullable=False, index=True)
    raw_material_id = Column(Integer, ForeignKey("raw_materials.id"), nullable=False, index=True)

    # per unit of finished good
    quantity_required = Column(DECIMAL(14, 4), nullable=False)

    finished_good = relationship("FinishedGood", back_populates="components")
    raw_material = relationship("RawMaterial", lazy="selectin")

    def __repr__(self):
        return f"<FinishedGoodComponent fg={self.finished_good_id} rm={self.raw_material_id} x{self.quantity_required}>"
