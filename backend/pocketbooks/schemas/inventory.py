"""Inventory schemas - raw materials, trading goods and finished goods"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from pocketbooks.models.enums import UnitOfMeasurement
from pocketbooks.schemas.common import clean_sku


# ===== Raw materials =====

class RawMaterialCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    unit: UnitOfMeasurement = UnitOfMeasurement.KG
    current_stock: float = Field(0, ge=0)
    reorder_level: float = Field(0, ge=0)
    cost_price: float = Field(0, ge=0)
    intended_for_id: Optional[int] = None
    last_procurement_date: Optional[datetime] = None

    class Config:
        use_enum_values = True


class RawMaterialUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    unit: Optional[UnitOfMeasurement] = None
    current_stock: Optional[float] = Field(None, ge=0)
    reorder_level: Optional[float] = Field(None, ge=0)
    cost_price: Optional[float] = Field(None, ge=0)
    intended_for_id: Optional[int] = None
    last_procurement_date: Optional[datetime] = None

    class Config:
        use_enum_values = True


class RawMaterialResponse(BaseModel):
    id: int
    name: str
    unit: str
    current_stock: float
    reorder_level: float
    cost_price: float
    intended_for_id: Optional[int] = None
    intended_for_name: Optional[str] = None
    last_procurement_date: Optional[datetime] = None
    is_low_stock: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ===== Trading goods =====

class TradingGoodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    sku: str = Field(..., min_length=1, max_length=50)
    unit: UnitOfMeasurement = UnitOfMeasurement.PIECE
    current_stock: float = Field(0, ge=0)
    reorder_level: float = Field(0, ge=0)
    cost_price: float = Field(0, ge=0)
    selling_price: float = Field(0, ge=0)
    last_procurement_date: Optional[datetime] = None

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v):
        return clean_sku(v)

    class Config:
        use_enum_values = True


class TradingGoodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    unit: Optional[UnitOfMeasurement] = None
    current_stock: Optional[float] = Field(None, ge=0)
    reorder_level: Optional[float] = Field(None, ge=0)
    cost_price: Optional[float] = Field(None, ge=0)
    selling_price: Optional[float] = Field(None, ge=0)
    last_procurement_date: Optional[datetime] = None

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v):
        return clean_sku(v)

    class Config:
        use_enum_values = True


class TradingGoodResponse(BaseModel):
    id: int
    name: str
    sku: str
    unit: str
    current_stock: float
    reorder_level: float
    cost_price: float
    selling_price: float
    profit_margin: float = 0.0
    is_low_stock: bool = False
    last_procurement_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ===== Finished goods =====

class ComponentIn(BaseModel):
    raw_material_id: int
    quantity_required: float = Field(..., gt=0)


class ComponentResponse(BaseModel):
    id: int
    raw_material_id: int
    raw_material_name: Optional[str] = None
    unit: Optional[str] = None
    quantity_required: float


class FinishedGoodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    sku: str = Field(..., min_length=1, max_length=50)
    unit: UnitOfMeasurement = UnitOfMeasurement.PIECE
    current_stock: float = Field(0, ge=0)
    components: List[ComponentIn] = Field(default_factory=list)
    manufacturing_cost: float = Field(0, ge=0)
    selling_price: float = Field(0, ge=0)
    last_manufacture_date: Optional[datetime] = None

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v):
        return clean_sku(v)

    class Config:
        use_enum_values = True


class FinishedGoodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    unit: Optional[UnitOfMeasurement] = None
    current_stock: Optional[float] = Field(None, ge=0)
    components: Optional[List[ComponentIn]] = None
    manufacturing_cost: Optional[float] = Field(None, ge=0)
    selling_price: Optional[float] = Field(None, ge=0)
    last_manufacture_date: Optional[datetime] = None

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v):
        return clean_sku(v)

    class Config:
        use_enum_values = True


class FinishedGoodResponse(BaseModel):
    id: int
    name: str
    sku: str
    unit: str
    current_stock: float
    components: List[ComponentResponse] = []
    manufacturing_cost: float
    selling_price: float
    profit_margin: float = 0.0
    last_manufacture_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProduceRequest(BaseModel):
    """Manufacture ``quantity`` units from the bill of materials"""
    quantity: float = Field(..., gt=0)
    notes: Optional[str] = Field(None, max_length=500)
