# schemas/payment.py
"""
Pydantic schemas for rent payments.
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models import PaymentMethod, PaymentStatus


class PaymentCreate(BaseModel):
     """
     Schema for recording a payment.

     month/year default to the month of payment_date.
     """
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     payment_date: Optional[date] = None
     month: Optional[int] = Field(None, ge=1, le=12)
     year: Optional[int] = Field(None, ge=1900, le=9999)
     payment_method: PaymentMethod = PaymentMethod.CASH
     reference_number: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None
     late_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 4000.00,
                    "payment_date": "2026-03-08",
                    "payment_method": "BANK_TRANSFER",
                    "reference_number": "TRX-10021"
               }
          }
     )


class PaymentResponse(BaseModel):
     id: int
     agreement_id: int
     amount: Decimal
     payment_date: date
     month: int
     year: int
     payment_method: PaymentMethod
     reference_number: Optional[str] = None
     notes: Optional[str] = None
     is_late: bool
     late_fee: Decimal
     status: PaymentStatus

     model_config = ConfigDict(from_attributes=True)


class YearlyTotalResponse(BaseModel):
     agreement_id: int
     year: int
     total: Decimal
