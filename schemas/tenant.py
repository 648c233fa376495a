# schemas/tenant.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class TenantCreate(BaseModel):
     """Schema for registering a tenant."""
     full_name: str = Field(..., min_length=1, max_length=200)
     phone_number: str = Field(..., min_length=1, max_length=50)
     email: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=500)
     id_type: Optional[str] = Field(None, max_length=50, description="e.g. National ID, Passport")
     id_number: Optional[str] = Field(None, max_length=100)
     emergency_contact: Optional[str] = Field(None, max_length=200)
     emergency_phone: Optional[str] = Field(None, max_length=50)
     company_name: Optional[str] = Field(None, max_length=255)
     business_type: Optional[str] = Field(None, max_length=100)
     notes: Optional[str] = None


class TenantUpdate(BaseModel):
     full_name: Optional[str] = Field(None, min_length=1, max_length=200)
     phone_number: Optional[str] = Field(None, min_length=1, max_length=50)
     email: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=500)
     id_type: Optional[str] = Field(None, max_length=50)
     id_number: Optional[str] = Field(None, max_length=100)
     emergency_contact: Optional[str] = Field(None, max_length=200)
     emergency_phone: Optional[str] = Field(None, max_length=50)
     company_name: Optional[str] = Field(None, max_length=255)
     business_type: Optional[str] = Field(None, max_length=100)
     notes: Optional[str] = None


class TenantResponse(BaseModel):
     id: int
     full_name: str
     phone_number: str
     email: Optional[str] = None
     address: Optional[str] = None
     id_type: Optional[str] = None
     id_number: Optional[str] = None
     emergency_contact: Optional[str] = None
     emergency_phone: Optional[str] = None
     company_name: Optional[str] = None
     business_type: Optional[str] = None
     notes: Optional[str] = None
     is_active: bool
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
