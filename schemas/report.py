# schemas/report.py
"""
Response schemas for the read-only reports.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, List
from pydantic import BaseModel, ConfigDict

from models import AgreementStatus, ExpenseCategory
from schemas.activity import ActivityResponse
from schemas.expense import ExpenseResponse


class AgreementFinancialsResponse(BaseModel):
     agreement_id: int
     agreement_number: str
     shop_number: str
     tenant_name: str
     collected: Decimal
     outstanding: Decimal

     model_config = ConfigDict(from_attributes=True)


class FinancialReportResponse(BaseModel):
     start_date: date
     end_date: date
     rent_collected: Decimal
     total_expenses: Decimal
     net_income: Decimal
     outstanding_rent: Decimal
     expenses_by_category: Dict[ExpenseCategory, Decimal]
     agreements: List[AgreementFinancialsResponse]

     model_config = ConfigDict(from_attributes=True)


class ExpiringAgreementResponse(BaseModel):
     agreement_id: int
     agreement_number: str
     shop_number: str
     tenant_name: str
     end_date: date
     days_left: int

     model_config = ConfigDict(from_attributes=True)


class LeaseReportResponse(BaseModel):
     as_of: date
     status_counts: Dict[AgreementStatus, int]
     total_shops: int
     occupied_shops: int
     occupancy_rate: float
     expiring_soon: List[ExpiringAgreementResponse]

     model_config = ConfigDict(from_attributes=True)


class ExpenseReportResponse(BaseModel):
     start_date: date
     end_date: date
     total: Decimal
     by_category: Dict[ExpenseCategory, Decimal]
     expenses: List[ExpenseResponse]

     model_config = ConfigDict(from_attributes=True)


class ActivityReportResponse(BaseModel):
     activities: List[ActivityResponse]
     total: int
