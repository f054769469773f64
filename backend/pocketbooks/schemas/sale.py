"""Sale schemas"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from pocketbooks.models.enums import InventoryItemType, PaymentMethod, SaleStatus
from pocketbooks.schemas.common import InitialPayment


class SaleItemIn(BaseModel):
    item_id: int
    item_type: InventoryItemType
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)

    class Config:
        use_enum_values = True


class SaleItemResponse(BaseModel):
    id: int
    item_id: int
    item_type: str
    item_name: Optional[str] = None
    quantity: float
    unit_price: float
    total: float

    class Config:
        from_attributes = True


class SaleCreate(BaseModel):
    client_id: int
    sale_date: datetime
    items: List[SaleItemIn] = Field(..., min_length=1)
    discount: float = Field(0, ge=0)
    gst_percentage: float = Field(0, ge=0, le=100)
    invoice_number: Optional[str] = Field(None, max_length=50)
    payment_terms: Optional[str] = Field(None, max_length=100)
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    initial_payment: Optional[InitialPayment] = None


class SaleUpdate(BaseModel):
    client_id: Optional[int] = None
    sale_date: Optional[datetime] = None
    items: Optional[List[SaleItemIn]] = Field(None, min_length=1)
    discount: Optional[float] = Field(None, ge=0)
    gst_percentage: Optional[float] = Field(None, ge=0, le=100)
    invoice_number: Optional[str] = Field(None, max_length=50)
    payment_terms: Optional[str] = Field(None, max_length=100)
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    notes: Optional[str] = None


class SaleResponse(BaseModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    sale_date: datetime
    invoice_number: str
    items: List[SaleItemResponse] = []
    subtotal: float
    discount: float
    gst_percentage: float
    gst_amount: float
    grand_total: float
    total_paid: float
    remaining_amount: float
    payment_status: str
    status: str
    payment_terms: Optional[str] = None
    expected_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class SaleStatusUpdate(BaseModel):
    status: SaleStatus

    class Config:
        use_enum_values = True


class SaleStatusResponse(BaseModel):
    id: int
    invoice_number: str
    status: str
    payment_status: str
    grand_total: float
    total_paid: float
    remaining_amount: float


class SalePaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: Optional[datetime] = None
    transaction_id: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)
    tranche_number: Optional[int] = Field(None, ge=1)
    total_tranches: Optional[int] = Field(None, ge=1)

    class Config:
        use_enum_values = True


class SaleStats(BaseModel):
    total_sales: int = 0
    total_revenue: float = 0.0
    total_paid: float = 0.0
    total_outstanding: float = 0.0
    average_sale_value: float = 0.0
    by_status: Dict[str, int] = {}
    by_payment_status: Dict[str, int] = {}
