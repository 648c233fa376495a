# routers/agreements.py
"""
Lease agreement API routes for LeaseHub.

Covers the agreement lifecycle (create, status changes, renewal, expiry,
deletion) and the rent ledger endpoints hanging off an agreement:
rent summary, payments and yearly totals.
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import AgreementStatus, LeaseAgreement
from schemas.agreement import (
     AgreementCreate,
     AgreementStatusUpdate,
     AgreementRenew,
     AgreementEndDateUpdate,
     AgreementResponse,
)
from schemas.payment import PaymentCreate, PaymentResponse, YearlyTotalResponse
from schemas.rent import RentSummaryResponse
from services import entity_store, payment_service
from services.entity_store import SessionContext
from services.lease_service import LeaseService
from services.rent_ledger import get_rent_summary
from utils.auth import get_current_context

router = APIRouter(prefix="/api/agreements", tags=["agreements"])


def _build_agreement_response(agreement: LeaseAgreement) -> AgreementResponse:
     """Build AgreementResponse with shop and tenant names."""
     response = AgreementResponse.model_validate(agreement)
     if agreement.shop:
          response.shop_number = agreement.shop.shop_number
     if agreement.tenant:
          response.tenant_name = agreement.tenant.full_name
     return response


@router.post(
     "",
     response_model=AgreementResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a lease agreement"
)
def create_agreement(
     agreement_data: AgreementCreate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     """
     Create an ACTIVE agreement and mark the shop OCCUPIED.

     - **409** when the shop already has an active agreement or the number is taken
     - **400** when rent_due_day is outside 1-31 or the term is inverted
     """
     agreement = LeaseService.create_agreement(db, ctx, **agreement_data.model_dump(exclude_none=True))
     return _build_agreement_response(agreement)


@router.get("", response_model=List[AgreementResponse], summary="List agreements")
def list_agreements(
     status: Optional[AgreementStatus] = Query(None, description="Filter by status"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return [_build_agreement_response(a) for a in entity_store.list_agreements(db, ctx, status)]


@router.post("/expire", response_model=List[AgreementResponse], summary="Expire agreements past their end date")
def expire_agreements(
     today: Optional[date] = Query(None, description="Reference date (default: today)"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return [_build_agreement_response(a) for a in LeaseService.expire_agreements(db, ctx, today)]


@router.get("/{agreement_id}", response_model=AgreementResponse, summary="Get an agreement")
def get_agreement(agreement_id: int, db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     return _build_agreement_response(entity_store.get_agreement(db, ctx, agreement_id))


@router.patch("/{agreement_id}/status", response_model=AgreementResponse, summary="Change agreement status")
def update_agreement_status(
     agreement_id: int,
     body: AgreementStatusUpdate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return _build_agreement_response(LeaseService.update_status(db, ctx, agreement_id, body.status))


@router.post(
     "/{agreement_id}/renew",
     response_model=AgreementResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Renew an agreement"
)
def renew_agreement(
     agreement_id: int,
     body: AgreementRenew,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     successor = LeaseService.renew_agreement(db, ctx, agreement_id, **body.model_dump(exclude_none=True))
     return _build_agreement_response(successor)


@router.patch("/{agreement_id}/end-date", response_model=AgreementResponse, summary="Change the end date")
def update_end_date(
     agreement_id: int,
     body: AgreementEndDateUpdate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     return _build_agreement_response(LeaseService.extend_agreement(db, ctx, agreement_id, body.end_date))


@router.delete("/{agreement_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an agreement")
def delete_agreement(agreement_id: int, db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     LeaseService.delete_agreement(db, ctx, agreement_id)


# ---------------------------------------------------------------------------
# Rent ledger
# ---------------------------------------------------------------------------

@router.get("/{agreement_id}/rent-summary", response_model=RentSummaryResponse, summary="Rent summary")
def rent_summary(
     agreement_id: int,
     as_of: Optional[date] = Query(None, description="Date whose month is the current period"),
     newest_first: bool = Query(False, description="Order periods newest first"),
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     """
     Per-month due / paid / remaining from the agreement start through the
     current month, with current remaining, previous pending and total remaining.
     """
     summary = get_rent_summary(db, ctx, agreement_id, as_of=as_of, newest_first=newest_first)
     return RentSummaryResponse.model_validate(summary)


@router.post(
     "/{agreement_id}/payments",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a rent payment"
)
def record_payment(
     agreement_id: int,
     payment_data: PaymentCreate,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     """
     Record a payment for a period (default: the payment date's month).

     Rejected with **400** when the amount exceeds what remains due for the period.
     """
     return payment_service.record_payment(
          db,
          ctx,
          agreement_id,
          amount=payment_data.amount,
          payment_date=payment_data.payment_date,
          method=payment_data.payment_method,
          reference=payment_data.reference_number,
          notes=payment_data.notes,
          month=payment_data.month,
          year=payment_data.year,
          late_fee=payment_data.late_fee
     )


@router.get("/{agreement_id}/payments", response_model=List[PaymentResponse], summary="Payment history")
def payment_history(agreement_id: int, db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     return payment_service.payment_history(db, ctx, agreement_id)


@router.get("/{agreement_id}/payments/yearly/{year}", response_model=YearlyTotalResponse, summary="Total paid in a year")
def yearly_total(
     agreement_id: int,
     year: int,
     db: Session = Depends(get_session),
     ctx: SessionContext = Depends(get_current_context)
):
     total = payment_service.yearly_total(db, ctx, agreement_id, year)
     return YearlyTotalResponse(agreement_id=agreement_id, year=year, total=total)
