"""Client schemas"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from pocketbooks.models.enums import EntityStatus
from pocketbooks.schemas.common import Address, clean_email, clean_phone, clean_gst_number


class PartyFields(BaseModel):
    """Validators shared by client and vendor payloads"""

    @field_validator("name", check_fields=False)
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email", check_fields=False)
    @classmethod
    def check_email(cls, v):
        return clean_email(v)

    @field_validator("phone", check_fields=False)
    @classmethod
    def check_phone(cls, v):
        return clean_phone(v)

    @field_validator("gst_number", check_fields=False)
    @classmethod
    def check_gst(cls, v):
        return clean_gst_number(v)

    class Config:
        use_enum_values = True


class ClientBase(PartyFields):
    name: str = Field(..., min_length=1, max_length=100)
    contact_person: Optional[str] = Field(None, max_length=100)
    email: str = Field(..., max_length=255)
    phone: Optional[str] = None
    address: Optional[Address] = None
    status: EntityStatus = EntityStatus.ACTIVE
    gst_number: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(PartyFields):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    contact_person: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = None
    address: Optional[Address] = None
    status: Optional[EntityStatus] = None
    gst_number: Optional[str] = None


class ClientResponse(BaseModel):
    id: int
    name: str
    contact_person: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: Optional[Address] = None
    status: str
    gst_number: Optional[str] = None
    outstanding_balance: float = 0.0
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
