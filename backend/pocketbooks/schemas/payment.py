"""Payment schemas"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from pocketbooks.models.enums import (
    AccountType, PartyType, PaymentMethod, ProcurementType, TransactionType
)


class PaymentCreate(BaseModel):
    payment_date: Optional[datetime] = None
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    transaction_type: TransactionType
    transaction_id: Optional[str] = Field(None, max_length=100)
    account_type: AccountType
    party_id: Optional[int] = None
    party_type: Optional[PartyType] = None
    sale_id: Optional[int] = None
    procurement_id: Optional[int] = None
    procurement_type: Optional[ProcurementType] = None
    asset_id: Optional[int] = None
    asset_procurement_id: Optional[int] = None
    expense_id: Optional[int] = None
    tranche_number: int = Field(1, ge=1)
    total_tranches: int = Field(1, ge=1)
    notes: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_party(self):
        if self.transaction_type != TransactionType.EXPENSE.value:
            if self.party_id is None or self.party_type is None:
                raise ValueError("party_id and party_type are required unless the payment is an expense")
        if self.procurement_id is not None and self.procurement_type is None:
            raise ValueError("procurement_type is required with procurement_id")
        if self.tranche_number > self.total_tranches:
            raise ValueError("tranche_number cannot exceed total_tranches")
        return self

    class Config:
        use_enum_values = True


class PaymentUpdate(BaseModel):
    payment_date: Optional[datetime] = None
    amount: Optional[float] = Field(None, gt=0)
    payment_method: Optional[PaymentMethod] = None
    transaction_id: Optional[str] = Field(None, max_length=100)
    tranche_number: Optional[int] = Field(None, ge=1)
    total_tranches: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = Field(None, max_length=500)

    class Config:
        use_enum_values = True


class PaymentResponse(BaseModel):
    id: int
    payment_date: datetime
    amount: float
    payment_method: str
    transaction_type: str
    transaction_id: Optional[str] = None
    account_type: str
    party_id: Optional[int] = None
    party_type: Optional[str] = None
    party_name: Optional[str] = None
    sale_id: Optional[int] = None
    procurement_id: Optional[int] = None
    procurement_type: Optional[str] = None
    asset_id: Optional[int] = None
    asset_procurement_id: Optional[int] = None
    expense_id: Optional[int] = None
    tranche_number: int = 1
    total_tranches: int = 1
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DailyTotal(BaseModel):
    date: str
    amount: float
    count: int


class PaymentStats(BaseModel):
    total_amount: float = 0.0
    count: int = 0
    average_amount: float = 0.0
    by_transaction_type: Dict[str, float] = {}
    by_payment_method: Dict[str, float] = {}
    daily_trend: List[DailyTotal] = []
