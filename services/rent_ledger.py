"""
Rent Ledger Engine - derived due / paid / remaining state per rent period.

Nothing here is persisted. For an agreement with monthly rent R and a
(month, year) period:
1. due = R (flat, no proration)
2. paid = sum of the agreement's payment rows for the period
3. remaining = max(0, due - paid)
4. status = PAID if paid >= due, PARTIAL if 0 < paid, else UNPAID

The historical ledger runs from the agreement's start month through the
as-of month (bounded by the agreement's end month), oldest first.
"""
import calendar
import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session

from models import LeaseAgreement
from services import entity_store
from services.entity_store import SessionContext, to_money
from services.exceptions import guard_storage

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

Period = Tuple[int, int]  # (year, month)


class RentStatus(str, enum.Enum):
     """Derived status of one rent period (not the status stored on a payment row)."""
     PAID = "PAID"
     PARTIAL = "PARTIAL"
     UNPAID = "UNPAID"


@dataclass(frozen=True)
class PeriodRecord:
     month: int
     year: int
     due: Decimal
     paid: Decimal
     remaining: Decimal
     status: RentStatus

     @property
     def label(self) -> str:
          return period_label(self.month, self.year)


@dataclass
class RentSummary:
     agreement_id: int
     as_of: date
     current_remaining: Decimal
     previous_pending_total: Decimal
     total_remaining: Decimal
     records: List[PeriodRecord] = field(default_factory=list)


def period_label(month: int, year: int) -> str:
     return f"{calendar.month_name[month]} {year}"


def period_remaining(due: Decimal, paid: Decimal) -> Decimal:
     return max(ZERO, to_money(due) - to_money(paid))


def period_status(due: Decimal, paid: Decimal) -> RentStatus:
     if paid >= due:
          return RentStatus.PAID
     if paid > 0:
          return RentStatus.PARTIAL
     return RentStatus.UNPAID


def build_period(month: int, year: int, due, paid) -> PeriodRecord:
     due = to_money(due)
     paid = to_money(paid)
     return PeriodRecord(
          month=month,
          year=year,
          due=due,
          paid=paid,
          remaining=period_remaining(due, paid),
          status=period_status(due, paid)
     )


def iter_periods(first: Period, last: Period) -> Iterator[Period]:
     """Yield (year, month) from first through last inclusive."""
     year, month = first
     while (year, month) <= last:
          yield year, month
          month += 1
          if month > 12:
               month = 1
               year += 1


def _as_period(value: date) -> Period:
     return value.year, value.month


def in_term(agreement: LeaseAgreement, month: int, year: int) -> bool:
     """True when (month, year) lies between the agreement's start and end months."""
     return _as_period(agreement.start_date) <= (year, month) <= _as_period(agreement.end_date)


def is_late_payment(payment_date: date, rent_due_day: int) -> bool:
     return payment_date.day > rent_due_day


class RentLedger:
     """
     Lazy, restartable per-period view of one agreement as of a date.

     Payment totals are read once when the ledger is built; every iteration
     recomputes records from that snapshot in chronological order.
     """

     def __init__(self, agreement: LeaseAgreement, paid_by_period: Dict[Period, Decimal], as_of: date):
          self.agreement = agreement
          self.as_of = as_of
          self.due = to_money(agreement.monthly_rent)
          self._paid = paid_by_period
          self._first = _as_period(agreement.start_date)
          self._last = min(_as_period(as_of), _as_period(agreement.end_date))

     def __iter__(self) -> Iterator[PeriodRecord]:
          for year, month in iter_periods(self._first, self._last):
               yield self.record(month, year)

     def record(self, month: int, year: int) -> PeriodRecord:
          return build_period(month, year, self.due, self._paid.get((year, month), ZERO))

     @property
     def current_remaining(self) -> Decimal:
          month, year = self.as_of.month, self.as_of.year
          if not in_term(self.agreement, month, year):
               return ZERO
          return self.record(month, year).remaining

     @property
     def previous_pending_total(self) -> Decimal:
          current = _as_period(self.as_of)
          total = ZERO
          for record in self:
               if (record.year, record.month) < current:
                    total += record.remaining
          return total

     def summary(self, newest_first: bool = False) -> RentSummary:
          records = list(self)
          if newest_first:
               records.reverse()
          current = self.current_remaining
          previous = self.previous_pending_total
          return RentSummary(
               agreement_id=self.agreement.id,
               as_of=self.as_of,
               current_remaining=current,
               previous_pending_total=previous,
               total_remaining=current + previous,
               records=records
          )


def ledger_for(db: Session, agreement: LeaseAgreement, as_of: Optional[date] = None) -> RentLedger:
     return RentLedger(agreement, entity_store.paid_by_period(db, agreement.id), as_of or date.today())


def period_balance(db: Session, agreement: LeaseAgreement, month: int, year: int) -> PeriodRecord:
     """Due / paid / remaining for a single period, read straight from the store."""
     paid = entity_store.total_paid_for_period(db, agreement.id, month, year)
     return build_period(month, year, agreement.monthly_rent, paid)


@guard_storage
def get_rent_summary(
     db: Session,
     ctx: SessionContext,
     agreement_id: int,
     as_of: Optional[date] = None,
     newest_first: bool = False
) -> RentSummary:
     """
     Historical rent summary for an agreement.

     Args:
          db: SQLAlchemy database session
          ctx: caller's session context
          agreement_id: ID of the lease agreement
          as_of: date whose month is the "current" period (default: today)
          newest_first: order records newest period first

     Returns:
          RentSummary with current remaining, previous pending and total remaining

     Raises:
          NotFoundError: If the agreement does not exist for this user
     """
     agreement = entity_store.get_agreement(db, ctx, agreement_id)
     summary = ledger_for(db, agreement, as_of).summary(newest_first=newest_first)
     logger.debug(
          "Rent summary agreement=%s current=%s previous=%s",
          agreement_id, summary.current_remaining, summary.previous_pending_total
     )
     return summary
