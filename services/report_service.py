"""
Report Service - read-only financial, lease, expense and activity reports.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models import ActivityLog, AgreementStatus, Expense, ExpenseCategory, ShopStatus
from services import entity_store
from services.entity_store import SessionContext, to_money
from services.exceptions import ValidationFailure, guard_storage
from services.rent_ledger import ledger_for

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class AgreementFinancials:
     agreement_id: int
     agreement_number: str
     shop_number: str
     tenant_name: str
     collected: Decimal
     outstanding: Decimal


@dataclass
class FinancialReport:
     start_date: date
     end_date: date
     rent_collected: Decimal
     total_expenses: Decimal
     net_income: Decimal
     outstanding_rent: Decimal
     expenses_by_category: Dict[ExpenseCategory, Decimal] = field(default_factory=dict)
     agreements: List[AgreementFinancials] = field(default_factory=list)


@dataclass
class ExpiringAgreement:
     agreement_id: int
     agreement_number: str
     shop_number: str
     tenant_name: str
     end_date: date
     days_left: int


@dataclass
class LeaseReport:
     as_of: date
     status_counts: Dict[AgreementStatus, int]
     total_shops: int
     occupied_shops: int
     occupancy_rate: float
     expiring_soon: List[ExpiringAgreement] = field(default_factory=list)


@dataclass
class ExpenseReport:
     start_date: date
     end_date: date
     total: Decimal
     by_category: Dict[ExpenseCategory, Decimal]
     expenses: List[Expense] = field(default_factory=list)


def _check_range(start_date: date, end_date: date) -> None:
     if end_date < start_date:
          raise ValidationFailure("Report end date cannot be before start date", "INVALID_RANGE")


@guard_storage
def financial_report(
     db: Session,
     ctx: SessionContext,
     start_date: date,
     end_date: date,
     shop_id: Optional[int] = None
) -> FinancialReport:
     """
     Rent collected and expenses over a date range, with outstanding rent as of its end.

     Collected rent counts payments by payment date. Outstanding rent is the
     ledger's total remaining for each ACTIVE agreement as of end_date.
     """
     _check_range(start_date, end_date)
     if shop_id is not None:
          entity_store.get_shop(db, ctx, shop_id, include_inactive=True)

     collected_by_agreement: Dict[int, Decimal] = {}
     for payment in entity_store.payments_between(db, ctx, start_date, end_date):
          collected_by_agreement[payment.agreement_id] = (
               collected_by_agreement.get(payment.agreement_id, ZERO) + to_money(payment.amount)
          )

     rows = []
     agreements = entity_store.list_agreements(db, ctx)
     for agreement in agreements:
          if shop_id is not None and agreement.shop_id != shop_id:
               continue
          collected = collected_by_agreement.get(agreement.id, ZERO)
          outstanding = ZERO
          if agreement.status == AgreementStatus.ACTIVE:
               outstanding = ledger_for(db, agreement, end_date).summary().total_remaining
          if collected == ZERO and outstanding == ZERO:
               continue
          rows.append(AgreementFinancials(
               agreement_id=agreement.id,
               agreement_number=agreement.agreement_number,
               shop_number=agreement.shop.shop_number,
               tenant_name=agreement.tenant.full_name,
               collected=collected,
               outstanding=outstanding
          ))

     rent_collected = sum((row.collected for row in rows), ZERO)
     total_expenses = entity_store.total_expenses_between(db, start_date, end_date, shop_id)
     return FinancialReport(
          start_date=start_date,
          end_date=end_date,
          rent_collected=rent_collected,
          total_expenses=total_expenses,
          net_income=rent_collected - total_expenses,
          outstanding_rent=sum((row.outstanding for row in rows), ZERO),
          expenses_by_category=entity_store.expenses_by_category(db, start_date, end_date, shop_id),
          agreements=rows
     )


@guard_storage
def lease_report(
     db: Session,
     ctx: SessionContext,
     as_of: Optional[date] = None,
     expiring_within_days: int = 30
) -> LeaseReport:
     """Agreement counts per status, occupancy, and ACTIVE agreements ending soon."""
     as_of = as_of or date.today()
     counts = {status: 0 for status in AgreementStatus}
     for agreement in entity_store.list_agreements(db, ctx):
          counts[agreement.status] += 1

     total = sum(entity_store.count_shops_by_status(db, ctx, status) for status in ShopStatus)
     occupied = entity_store.count_shops_by_status(db, ctx, ShopStatus.OCCUPIED)

     horizon = as_of + timedelta(days=expiring_within_days)
     expiring = [
          ExpiringAgreement(
               agreement_id=agreement.id,
               agreement_number=agreement.agreement_number,
               shop_number=agreement.shop.shop_number,
               tenant_name=agreement.tenant.full_name,
               end_date=agreement.end_date,
               days_left=(agreement.end_date - as_of).days
          )
          for agreement in entity_store.agreements_expiring_before(db, ctx, horizon + timedelta(days=1))
          if agreement.end_date >= as_of
     ]

     return LeaseReport(
          as_of=as_of,
          status_counts=counts,
          total_shops=total,
          occupied_shops=occupied,
          occupancy_rate=round(occupied * 100.0 / total, 2) if total else 0.0,
          expiring_soon=expiring
     )


@guard_storage
def expense_report(db: Session, start_date: date, end_date: date, shop_id: Optional[int] = None) -> ExpenseReport:
     _check_range(start_date, end_date)
     return ExpenseReport(
          start_date=start_date,
          end_date=end_date,
          total=entity_store.total_expenses_between(db, start_date, end_date, shop_id),
          by_category=entity_store.expenses_by_category(db, start_date, end_date, shop_id),
          expenses=entity_store.expenses_between(db, start_date, end_date, shop_id)
     )


@guard_storage
def activity_report(
     db: Session,
     ctx: SessionContext,
     start: Optional[datetime] = None,
     end: Optional[datetime] = None
) -> List[ActivityLog]:
     """Recent activity, or every entry between start and end when both are given."""
     if start is None or end is None:
          return entity_store.recent_activities(db, ctx)
     if end < start:
          raise ValidationFailure("Report end cannot be before start", "INVALID_RANGE")
     return entity_store.activities_between(db, ctx, start, end)
