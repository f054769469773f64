"""Expense schemas"""
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

from pocketbooks.models.enums import ExpenseCategory, PaymentMethod


class ExpenseCreate(BaseModel):
    date: datetime
    category: ExpenseCategory
    description: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    receipt_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Description is required")
        return v

    class Config:
        use_enum_values = True


class ExpenseUpdate(BaseModel):
    date: Optional[datetime] = None
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[float] = Field(None, gt=0)
    payment_method: Optional[PaymentMethod] = None
    receipt_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)

    class Config:
        use_enum_values = True


class ExpenseResponse(BaseModel):
    id: int
    date: datetime
    category: str
    description: str
    amount: float
    payment_method: str
    receipt_number: Optional[str] = None
    notes: Optional[str] = None
    payment_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ExpenseStats(BaseModel):
    total_amount: float = 0.0
    count: int = 0
    average_amount: float = 0.0
    by_category: Dict[str, float] = {}
    this_month: float = 0.0
    last_month: float = 0.0
