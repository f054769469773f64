"""Asset and asset procurement schemas"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pocketbooks.models.enums import AssetCategory, AssetStatus
from pocketbooks.schemas.common import InitialPayment


class AssetCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: AssetCategory = AssetCategory.OTHER
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_date: datetime
    purchase_price: float = Field(..., ge=0)
    current_value: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=100)
    vendor_id: Optional[int] = None
    status: AssetStatus = AssetStatus.ACTIVE
    gst_enabled: bool = False
    gst_percentage: float = Field(0, ge=0, le=100)
    gst_amount: float = Field(0, ge=0)
    notes: Optional[str] = None
    payment_details: Optional[InitialPayment] = None

    class Config:
        use_enum_values = True


class AssetUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[AssetCategory] = None
    serial_number: Optional[str] = Field(None, max_length=100)
    purchase_date: Optional[datetime] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    current_value: Optional[float] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=100)
    status: Optional[AssetStatus] = None
    gst_enabled: Optional[bool] = None
    gst_percentage: Optional[float] = Field(None, ge=0, le=100)
    gst_amount: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class AssetResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: str
    serial_number: Optional[str] = None
    purchase_date: datetime
    purchase_price: float
    current_value: float
    depreciation: float = 0.0
    location: Optional[str] = None
    status: str
    vendor_id: Optional[int] = None
    vendor_name: Optional[str] = None
    asset_procurement_id: Optional[int] = None
    gst_enabled: bool = False
    gst_percentage: float = 0.0
    gst_amount: float = 0.0
    total_paid: float = 0.0
    remaining_amount: float = 0.0
    payment_status: str = "unpaid"
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AssetStats(BaseModel):
    total_assets: int = 0
    by_status: Dict[str, int] = {}
    by_category: Dict[str, int] = {}
    total_investment: float = 0.0
    total_current_value: float = 0.0
    total_depreciation: float = 0.0
    total_paid: float = 0.0
    total_remaining: float = 0.0


# ===== Asset procurement =====

class AssetProcurementItemIn(BaseModel):
    asset_name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: AssetCategory = AssetCategory.OTHER
    quantity: int = Field(1, ge=1)
    unit_price: float = Field(..., ge=0)

    class Config:
        use_enum_values = True


class AssetProcurementItemResponse(BaseModel):
    id: int
    asset_name: str
    description: Optional[str] = None
    category: str
    quantity: int
    unit_price: float
    amount: float

    class Config:
        from_attributes = True


class AssetProcurementCreate(BaseModel):
    vendor_id: int
    procurement_date: datetime
    items: List[AssetProcurementItemIn] = Field(..., min_length=1)
    gst_amount: float = Field(0, ge=0)
    invoice_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
    payment_details: Optional[InitialPayment] = None


class AssetProcurementUpdate(BaseModel):
    invoice_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)


class AssetProcurementResponse(BaseModel):
    id: int
    vendor_id: int
    vendor_name: Optional[str] = None
    procurement_date: datetime
    items: List[AssetProcurementItemResponse] = []
    total_amount: float
    gst_amount: float
    grand_total: float
    total_paid: float = 0.0
    remaining_amount: float = 0.0
    payment_status: str = "unpaid"
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    status: str
    asset_ids: List[int] = []
    created_at: datetime
    updated_at: Optional[datetime] = None
