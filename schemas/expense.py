# schemas/expense.py
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models import ExpenseCategory, RecurringFrequency


class ExpenseCreate(BaseModel):
     """Schema for recording an expense. Leave shop_id empty for general expenses."""
     shop_id: Optional[int] = Field(None, gt=0)
     category: ExpenseCategory
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     description: str = Field(..., min_length=1, max_length=500)
     expense_date: date
     receipt_path: Optional[str] = Field(None, max_length=500)
     is_recurring: bool = False
     recurring_frequency: Optional[RecurringFrequency] = None
     notes: Optional[str] = None

     @model_validator(mode="after")
     def frequency_only_when_recurring(self):
          if self.recurring_frequency is not None and not self.is_recurring:
               raise ValueError("recurring_frequency requires is_recurring")
          return self


class ExpenseResponse(BaseModel):
     id: int
     shop_id: Optional[int] = None
     category: ExpenseCategory
     amount: Decimal
     description: str
     expense_date: date
     receipt_path: Optional[str] = None
     is_recurring: bool
     recurring_frequency: Optional[RecurringFrequency] = None
     notes: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)
