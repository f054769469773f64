"""Vendor schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from pocketbooks.models.enums import EntityStatus
from pocketbooks.schemas.client import PartyFields
from pocketbooks.schemas.common import Address


class VendorBase(PartyFields):
    name: str = Field(..., min_length=1, max_length=100)
    contact_person: Optional[str] = Field(None, max_length=100)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = None
    address: Optional[Address] = None
    specialty: Optional[str] = Field(None, max_length=200)
    raw_material_types: List[str] = Field(default_factory=list)
    status: EntityStatus = EntityStatus.ACTIVE
    gst_number: Optional[str] = None

    @field_validator("raw_material_types")
    @classmethod
    def dedupe_types(cls, v: List[str]) -> List[str]:
        seen = []
        for name in v:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


class VendorCreate(VendorBase):
    pass


class VendorUpdate(PartyFields):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    contact_person: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = None
    address: Optional[Address] = None
    specialty: Optional[str] = Field(None, max_length=200)
    raw_material_types: Optional[List[str]] = None
    status: Optional[EntityStatus] = None
    gst_number: Optional[str] = None


class VendorResponse(BaseModel):
    id: int
    name: str
    contact_person: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: Optional[Address] = None
    specialty: Optional[str] = None
    raw_material_types: List[str] = []
    status: str
    gst_number: Optional[str] = None
    outstanding_payable: float = 0.0
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("raw_material_types", mode="before")
    @classmethod
    def fix_null_types(cls, v):
        return v or []

    class Config:
        from_attributes = True
