"""
Reminder & Aggregation Engine - dashboard statistics and rent-due reminders.

Both are read-only projections over the entity store and the rent ledger.
Monthly revenue is taken over the current calendar month's rent period while
monthly expenses cover the trailing 30 days ending now.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

import config
from models import LeaseAgreement, Shop, ShopStatus, Tenant
from services import entity_store
from services.entity_store import SessionContext
from services.exceptions import guard_storage
from services.rent_ledger import RentStatus, period_balance, period_label

logger = logging.getLogger(__name__)

EXPENSE_WINDOW_DAYS = 30


@dataclass
class DashboardStats:
     total_shops: int
     vacant_shops: int
     occupied_shops: int
     active_tenants: int
     monthly_revenue: Decimal
     monthly_expenses: Decimal
     net_profit: Decimal


@dataclass
class RentDueReminder:
     agreement: LeaseAgreement
     shop: Shop
     tenant: Tenant
     due_date: date
     days_overdue: int
     amount_due: Decimal
     period: str


def due_date_for(rent_due_day: int, month: int, year: int) -> date:
     """The rent due date of a month; day 31 falls back to the month's last day."""
     last_day = calendar.monthrange(year, month)[1]
     return date(year, month, min(rent_due_day, last_day))


def days_between(now: datetime, due_date: date) -> int:
     """Whole days elapsed from the start of due_date to now (negative before it)."""
     return (now - datetime.combine(due_date, time.min)) // timedelta(days=1)


@guard_storage
def get_dashboard_stats(db: Session, ctx: SessionContext, now: Optional[datetime] = None) -> DashboardStats:
     now = now or datetime.now()
     vacant = entity_store.count_shops_by_status(db, ctx, ShopStatus.VACANT)
     occupied = entity_store.count_shops_by_status(db, ctx, ShopStatus.OCCUPIED)
     revenue = entity_store.revenue_for_period(db, ctx, now.month, now.year)
     expenses = entity_store.total_expenses_between(
          db,
          (now - timedelta(days=EXPENSE_WINDOW_DAYS)).date(),
          now.date()
     )
     return DashboardStats(
          total_shops=vacant + occupied,
          vacant_shops=vacant,
          occupied_shops=occupied,
          active_tenants=entity_store.count_active_tenants(db, ctx),
          monthly_revenue=revenue,
          monthly_expenses=expenses,
          net_profit=revenue - expenses
     )


@guard_storage
def get_rent_due_reminders(
     db: Session,
     ctx: SessionContext,
     now: Optional[datetime] = None,
     include_partial: Optional[bool] = None,
     upcoming_window_days: Optional[int] = None
) -> List[RentDueReminder]:
     """
     Reminders for ACTIVE agreements whose current period is overdue.

     An agreement is overdue once now is past the end of its due day and no
     payment row exists for the current period.

     Args:
          db: SQLAlchemy database session
          ctx: caller's session context
          now: evaluation time (default: now)
          include_partial: also remind for partially paid periods
               (default: REMINDER_INCLUDE_PARTIAL)
          upcoming_window_days: also remind for unpaid periods due within this
               many days, with a negative days_overdue
               (default: REMINDER_UPCOMING_DAYS)

     Returns:
          Reminders ordered most overdue first
     """
     now = now or datetime.now()
     if include_partial is None:
          include_partial = config.REMINDER_INCLUDE_PARTIAL
     if upcoming_window_days is None:
          upcoming_window_days = config.REMINDER_UPCOMING_DAYS

     today = now.date()
     reminders = []
     for agreement in entity_store.active_agreements(db, ctx):
          if agreement.start_date > today or agreement.end_date < today:
               continue

          due_date = due_date_for(agreement.rent_due_day, now.month, now.year)
          cutoff = datetime.combine(due_date, time.max)
          days = days_between(now, due_date)
          overdue = now > cutoff
          upcoming = not overdue and upcoming_window_days > 0 and -days <= upcoming_window_days
          if not (overdue or upcoming):
               continue

          balance = period_balance(db, agreement, now.month, now.year)
          if balance.status == RentStatus.PAID:
               continue
          if balance.status == RentStatus.PARTIAL and not include_partial:
               continue

          reminders.append(RentDueReminder(
               agreement=agreement,
               shop=agreement.shop,
               tenant=agreement.tenant,
               due_date=due_date,
               days_overdue=days,
               amount_due=balance.remaining,
               period=period_label(now.month, now.year)
          ))

     reminders.sort(key=lambda r: r.days_overdue, reverse=True)
     logger.debug("Built %d rent reminder(s) for user %s", len(reminders), ctx.user_id)
     return reminders
