"""Procurement schemas"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pocketbooks.models.enums import ProcurementStatus, PaymentMethod
from pocketbooks.schemas.common import InitialPayment


class ProcurementItemIn(BaseModel):
    item_id: int
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)


class ProcurementItemResponse(BaseModel):
    id: int
    item_id: Optional[int] = None
    item_name: Optional[str] = None
    quantity: float
    unit_price: float
    amount: float

    class Config:
        from_attributes = True


class ProcurementCreate(BaseModel):
    vendor_id: int
    procurement_date: datetime
    items: List[ProcurementItemIn] = Field(..., min_length=1)
    gst_percentage: float = Field(0, ge=0, le=100)
    status: ProcurementStatus = ProcurementStatus.ORDERED
    invoice_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
    payment_terms: Optional[str] = Field(None, max_length=100)
    received_date: Optional[datetime] = None
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    initial_payment: Optional[InitialPayment] = None

    class Config:
        use_enum_values = True


class ProcurementUpdate(BaseModel):
    vendor_id: Optional[int] = None
    procurement_date: Optional[datetime] = None
    items: Optional[List[ProcurementItemIn]] = Field(None, min_length=1)
    gst_percentage: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[ProcurementStatus] = None
    invoice_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
    payment_terms: Optional[str] = Field(None, max_length=100)
    received_date: Optional[datetime] = None
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None

    class Config:
        use_enum_values = True


class ProcurementResponse(BaseModel):
    id: int
    procurement_type: str
    vendor_id: int
    vendor_name: Optional[str] = None
    procurement_date: datetime
    items: List[ProcurementItemResponse] = []
    total_amount: float
    gst_percentage: float
    gst_amount: float
    grand_total: float
    total_paid: float
    remaining_amount: float
    payment_status: str
    status: str
    invoice_number: Optional[str] = None
    notes: Optional[str] = None
    payment_terms: Optional[str] = None
    received_date: Optional[datetime] = None
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProcurementPaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: Optional[datetime] = None
    transaction_id: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)
    tranche_number: Optional[int] = Field(None, ge=1)
    total_tranches: Optional[int] = Field(None, ge=1)

    class Config:
        use_enum_values = True


class ProcurementTypeStats(BaseModel):
    count: int = 0
    total_value: float = 0.0
    total_paid: float = 0.0
    total_remaining: float = 0.0
    by_status: Dict[str, int] = {}
    by_payment_status: Dict[str, int] = {}


class ProcurementStats(BaseModel):
    raw_material: ProcurementTypeStats
    trading_good: ProcurementTypeStats
    total_value: float = 0.0
    total_paid: float = 0.0
    total_remaining: float = 0.0
