# routers/reports.py
"""
Read-only report routes for LeaseHub.
"""
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_session
from schemas.activity import ActivityResponse
from schemas.report import (
     ActivityReportResponse,
     ExpenseReportResponse,
     FinancialReportResponse,
     LeaseReportResponse,
)
from services import report_service
from services.entity_store import SessionContext
from utils.auth import get_current_context

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/financial", response_model=FinancialReportResponse, summary="Financial report")
def financial_report(
     start_date: date = Query(..., description="First day of the range"),
     end_date: date = Query(..., description="Last day of the range"),
     shop_id: Optional[int] = Query(None, description="Restrict to one shop"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     """
     Rent collected and expenses between two dates, net income, and the rent
     still outstanding on active agreements as of the end date.
     """
     report = report_service.financial_report(db, ctx, start_date, end_date, shop_id)
     return FinancialReportResponse.model_validate(report)


@router.get("/lease", response_model=LeaseReportResponse, summary="Lease report")
def lease_report(
     expiring_within_days: int = Query(30, ge=0, le=3650),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     report = report_service.lease_report(db, ctx, expiring_within_days=expiring_within_days)
     return LeaseReportResponse.model_validate(report)


@router.get("/expenses", response_model=ExpenseReportResponse, summary="Expense report")
def expense_report(
     start_date: date = Query(...),
     end_date: date = Query(...),
     shop_id: Optional[int] = Query(None),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     report = report_service.expense_report(db, start_date, end_date, shop_id)
     return ExpenseReportResponse.model_validate(report)


@router.get("/activity", response_model=ActivityReportResponse, summary="Activity report")
def activity_report(
     start: Optional[datetime] = Query(None),
     end: Optional[datetime] = Query(None),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     activities = report_service.activity_report(db, ctx, start, end)
     return ActivityReportResponse(
          activities=[ActivityResponse.model_validate(a) for a in activities],
          total=len(activities)
     )
