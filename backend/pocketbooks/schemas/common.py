"""Envelope, pagination and field validators shared by every resource."""
import re
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from pocketbooks.core.config import settings
from pocketbooks.models.enums import PaymentMethod

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
GST_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$")


def clean_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().lower()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Please provide a valid email")
    return v


def clean_phone(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    v = v.strip()
    if not PHONE_PATTERN.match(v):
        raise ValueError("Please provide a valid 10-digit Indian mobile number")
    return v


def clean_gst_number(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    v = v.strip().upper()
    if not GST_PATTERN.match(v):
        raise ValueError("Please provide a valid GST number")
    return v


def clean_sku(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if not v:
        raise ValueError("SKU cannot be empty")
    return v


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope"""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """Success envelope for list endpoints"""
    success: bool = True
    data: List[T]
    pagination: Pagination


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class Address(BaseModel):
    street: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str = Field(default_factory=lambda: settings.DEFAULT_COUNTRY, max_length=100)


class InitialPayment(BaseModel):
    """Payment recorded together with a sale, procurement or asset purchase"""
    amount: float = Field(0, ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: Optional[datetime] = None
    transaction_id: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)
    total_tranches: int = Field(1, ge=1)

    class Config:
        use_enum_values = True
