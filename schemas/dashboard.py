# schemas/dashboard.py
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict


class DashboardStatsResponse(BaseModel):
     """Monthly revenue is the current calendar month; monthly expenses the trailing 30 days."""
     total_shops: int
     vacant_shops: int
     occupied_shops: int
     active_tenants: int
     monthly_revenue: Decimal
     monthly_expenses: Decimal
     net_profit: Decimal

     model_config = ConfigDict(from_attributes=True)


class RentDueReminderResponse(BaseModel):
     agreement_id: int
     agreement_number: str
     shop_id: int
     shop_number: str
     tenant_id: int
     tenant_name: str
     tenant_phone: str
     tenant_email: Optional[str] = None
     due_date: date
     days_overdue: int
     amount_due: Decimal
     period: str


class ReminderNotifyResponse(BaseModel):
     sent: int
     skipped: int
     failed: int
