# schemas/shop.py
"""
Pydantic schemas for Shop API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from models import ShopStatus


class ShopCreate(BaseModel):
     """Schema for adding a shop. New shops always start VACANT."""
     shop_number: str = Field(..., min_length=1, max_length=50)
     floor: int = Field(default=0)
     building_name: str = Field(default="", max_length=255)
     address: str = Field(default="", max_length=500)
     area: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
     monthly_rent: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     security_deposit: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     amenities: Optional[str] = None
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "shop_number": "G-12",
                    "floor": 0,
                    "building_name": "Central Plaza",
                    "address": "12 Market Road",
                    "area": 350.5,
                    "monthly_rent": 10000.00,
                    "security_deposit": 30000.00,
                    "amenities": "Parking,Water"
               }
          }
     )


class ShopUpdate(BaseModel):
     shop_number: Optional[str] = Field(None, min_length=1, max_length=50)
     floor: Optional[int] = None
     building_name: Optional[str] = Field(None, max_length=255)
     address: Optional[str] = Field(None, max_length=500)
     area: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
     monthly_rent: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     security_deposit: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     amenities: Optional[str] = None
     notes: Optional[str] = None


class ShopStatusUpdate(BaseModel):
     status: ShopStatus


class ShopResponse(BaseModel):
     id: int
     shop_number: str
     floor: int
     building_name: str
     address: str
     area: Decimal
     monthly_rent: Decimal
     security_deposit: Decimal
     amenities: Optional[str] = None
     status: ShopStatus
     is_active: bool
     notes: Optional[str] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
