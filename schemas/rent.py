# schemas/rent.py
from datetime import date
from decimal import Decimal
from typing import List
from pydantic import BaseModel, ConfigDict

from services.rent_ledger import RentStatus


class PeriodRecordResponse(BaseModel):
     month: int
     year: int
     label: str
     due: Decimal
     paid: Decimal
     remaining: Decimal
     status: RentStatus

     model_config = ConfigDict(from_attributes=True)


class RentSummaryResponse(BaseModel):
     agreement_id: int
     as_of: date
     current_remaining: Decimal
     previous_pending_total: Decimal
     total_remaining: Decimal
     records: List[PeriodRecordResponse]

     model_config = ConfigDict(from_attributes=True)
