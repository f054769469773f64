"""Loan account and interest payment schemas"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from pocketbooks.models.enums import LoanAccountStatus, PaymentMethod


class LoanAccountCreate(BaseModel):
    bank_name: str = Field(..., min_length=1, max_length=100)
    account_number: str = Field(..., min_length=1, max_length=50)
    loan_type: str = Field(..., min_length=1, max_length=50)
    principal_amount: float = Field(..., gt=0)
    interest_rate: float = Field(..., ge=0, le=100)
    start_date: datetime
    end_date: Optional[datetime] = None
    emi_amount: Optional[float] = Field(None, ge=0)
    # defaults to principal_amount
    outstanding_amount: Optional[float] = Field(None, ge=0)
    status: LoanAccountStatus = LoanAccountStatus.ACTIVE
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class LoanAccountUpdate(BaseModel):
    bank_name: Optional[str] = Field(None, min_length=1, max_length=100)
    account_number: Optional[str] = Field(None, min_length=1, max_length=50)
    loan_type: Optional[str] = Field(None, min_length=1, max_length=50)
    principal_amount: Optional[float] = Field(None, gt=0)
    interest_rate: Optional[float] = Field(None, ge=0, le=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    emi_amount: Optional[float] = Field(None, ge=0)
    outstanding_amount: Optional[float] = Field(None, ge=0)
    status: Optional[LoanAccountStatus] = None
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class LoanAccountResponse(BaseModel):
    id: int
    bank_name: str
    account_number: str
    loan_type: str
    principal_amount: float
    interest_rate: float
    start_date: datetime
    end_date: Optional[datetime] = None
    emi_amount: Optional[float] = None
    total_interest_paid: float = 0.0
    total_principal_paid: float = 0.0
    outstanding_amount: float = 0.0
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InterestPaymentCreate(BaseModel):
    loan_account_id: int
    date: datetime
    principal_amount: float = Field(0, ge=0)
    interest_amount: float = Field(..., gt=0)
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    notes: Optional[str] = Field(None, max_length=500)

    class Config:
        use_enum_values = True


class InterestPaymentUpdate(BaseModel):
    date: Optional[datetime] = None
    principal_amount: Optional[float] = Field(None, ge=0)
    interest_amount: Optional[float] = Field(None, gt=0)
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = Field(None, max_length=500)

    class Config:
        use_enum_values = True


class InterestPaymentResponse(BaseModel):
    id: int
    loan_account_id: int
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    date: datetime
    principal_amount: float
    interest_amount: float
    total_amount: float
    payment_method: str
    notes: Optional[str] = None
    expense_id: Optional[int] = None
    payment_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
