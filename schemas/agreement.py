# schemas/agreement.py
"""
Pydantic schemas for Lease Agreement API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models import AgreementStatus


class AgreementCreate(BaseModel):
     """Schema for creating a lease agreement. Rent and deposit default to the shop's."""
     shop_id: int = Field(..., gt=0, description="Shop ID (must exist and be active)")
     tenant_id: int = Field(..., gt=0, description="Tenant ID (must exist and be active)")
     start_date: date
     end_date: date
     agreement_number: Optional[str] = Field(None, min_length=1, max_length=64)
     monthly_rent: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     security_deposit: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     rent_due_day: Optional[int] = Field(None, description="Day of month rent is due (1-31)")
     payment_terms: Optional[str] = None
     maintenance_charges: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     utilities_included: bool = False
     notice_period_days: int = Field(default=30, ge=0)
     agreement_document_path: Optional[str] = Field(None, max_length=500)
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "shop_id": 1,
                    "tenant_id": 1,
                    "start_date": "2026-01-01",
                    "end_date": "2026-12-31",
                    "monthly_rent": 10000.00,
                    "rent_due_day": 5
               }
          }
     )


class AgreementStatusUpdate(BaseModel):
     status: AgreementStatus


class AgreementRenew(BaseModel):
     new_end_date: date
     agreement_number: Optional[str] = Field(None, min_length=1, max_length=64)
     monthly_rent: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     security_deposit: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     rent_due_day: Optional[int] = None


class AgreementEndDateUpdate(BaseModel):
     end_date: date


class AgreementResponse(BaseModel):
     id: int
     agreement_number: str
     shop_id: int
     tenant_id: int
     start_date: date
     end_date: date
     monthly_rent: Decimal
     security_deposit: Decimal
     rent_due_day: int
     payment_terms: Optional[str] = None
     maintenance_charges: Decimal
     utilities_included: bool
     notice_period_days: int
     agreement_document_path: Optional[str] = None
     status: AgreementStatus
     notes: Optional[str] = None
     created_at: Optional[datetime] = None

     # Optional related data
     shop_number: Optional[str] = None
     tenant_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)
