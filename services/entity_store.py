"""
Entity Store - CRUD helpers and indexed lookups over the leasing tables.

Every function takes the SQLAlchemy session first and, where records are
owned by a user, the caller's SessionContext. Lookups raise NotFoundError
instead of returning None when the caller asked for a specific record.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

import config
from models import (
     ActivityLog,
     AgreementStatus,
     Expense,
     ExpenseCategory,
     LeaseAgreement,
     RentPayment,
     Shop,
     ShopStatus,
     Tenant,
)
from services.exceptions import ConflictError, NotFoundError
from services.locks import record_lock

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class SessionContext:
     """The authenticated operator on whose behalf the core is called."""
     user_id: int
     username: str = ""


def to_money(value) -> Decimal:
     """Normalize a SUM() result or user input to a 2-place Decimal."""
     if value is None:
          return Decimal("0.00")
     if not isinstance(value, Decimal):
          value = Decimal(str(value))
     return value.quantize(CENT)


# ---------------------------------------------------------------------------
# Shops
# ---------------------------------------------------------------------------

def get_shop(db: Session, ctx: SessionContext, shop_id: int, include_inactive: bool = False) -> Shop:
     query = db.query(Shop).filter(Shop.id == shop_id, Shop.user_id == ctx.user_id)
     if not include_inactive:
          query = query.filter(Shop.is_active.is_(True))
     shop = query.first()
     if not shop:
          raise NotFoundError(f"Shop with ID {shop_id} not found")
     return shop


def list_shops(db: Session, ctx: SessionContext, status: Optional[ShopStatus] = None) -> List[Shop]:
     query = db.query(Shop).filter(Shop.user_id == ctx.user_id, Shop.is_active.is_(True))
     if status is not None:
          query = query.filter(Shop.status == status)
     return query.order_by(Shop.building_name, Shop.floor, Shop.shop_number).all()


def create_shop(db: Session, ctx: SessionContext, **fields) -> Shop:
     shop = Shop(user_id=ctx.user_id, status=ShopStatus.VACANT, **fields)
     db.add(shop)
     db.flush()
     add_activity(db, ctx, f"New shop '{shop.shop_number}' added")
     return shop


def update_shop(db: Session, ctx: SessionContext, shop_id: int, **fields) -> Shop:
     shop = get_shop(db, ctx, shop_id)
     for key, value in fields.items():
          if value is not None:
               setattr(shop, key, value)
     db.flush()
     add_activity(db, ctx, f"Shop '{shop.shop_number}' updated")
     return shop


MANUAL_SHOP_STATUSES = (ShopStatus.VACANT, ShopStatus.UNDER_MAINTENANCE, ShopStatus.RESERVED)


def update_shop_status(db: Session, ctx: SessionContext, shop_id: int, status: ShopStatus) -> Shop:
     """
     Set a shop's status by hand and commit.

     OCCUPIED follows the shop's agreements and is never set here. A shop with
     an ACTIVE agreement stays OCCUPIED until the agreement ends.

     Raises:
          NotFoundError: If the shop does not exist for this user
          ConflictError: If a leased shop would leave OCCUPIED, or an unleased
               shop would become OCCUPIED
     """
     with record_lock("shop", shop_id):
          shop = get_shop(db, ctx, shop_id)
          active = active_agreement_for_shop(db, shop.id)
          if active and status == ShopStatus.OCCUPIED:
               return shop
          if active:
               raise ConflictError(
                    f"Shop '{shop.shop_number}' is leased under agreement {active.agreement_number}",
                    "SHOP_LEASED"
               )
          if status not in MANUAL_SHOP_STATUSES:
               raise ConflictError(
                    f"Shop '{shop.shop_number}' has no active agreement and cannot be marked {status.value}",
                    "SHOP_NOT_LEASED"
               )
          shop.status = status
          db.flush()
          add_activity(db, ctx, f"Shop #{shop_id} status updated to {status.value}")
          db.commit()
     return shop



def deactivate_shop(db: Session, ctx: SessionContext, shop_id: int) -> Shop:
     """Soft delete: hides the shop from listings and counts, keeps its history."""
     shop = get_shop(db, ctx, shop_id)
     shop.is_active = False
     db.flush()
     add_activity(db, ctx, f"Shop '{shop.shop_number}' deactivated")
     return shop


def delete_shop(db: Session, ctx: SessionContext, shop_id: int) -> None:
     """Hard delete; cascades to the shop's agreements, their payments, and its expenses."""
     shop = get_shop(db, ctx, shop_id, include_inactive=True)
     number = shop.shop_number
     db.delete(shop)
     db.flush()
     add_activity(db, ctx, f"Shop '{number}' deleted")


def count_shops_by_status(db: Session, ctx: SessionContext, status: ShopStatus) -> int:
     return (
          db.query(func.count(Shop.id))
          .filter(Shop.user_id == ctx.user_id, Shop.is_active.is_(True), Shop.status == status)
          .scalar()
     ) or 0


# ---------------------------------------------------------------------------
# Tenants
# ---------------------------------------------------------------------------

def get_tenant(db: Session, ctx: SessionContext, tenant_id: int) -> Tenant:
     tenant = db.query(Tenant).filter(Tenant.id == tenant_id, Tenant.user_id == ctx.user_id).first()
     if not tenant:
          raise NotFoundError(f"Tenant with ID {tenant_id} not found")
     return tenant


def list_tenants(db: Session, ctx: SessionContext, include_inactive: bool = False) -> List[Tenant]:
     query = db.query(Tenant).filter(Tenant.user_id == ctx.user_id)
     if not include_inactive:
          query = query.filter(Tenant.is_active.is_(True))
     return query.order_by(Tenant.full_name).all()


def create_tenant(db: Session, ctx: SessionContext, **fields) -> Tenant:
     tenant = Tenant(user_id=ctx.user_id, **fields)
     db.add(tenant)
     db.flush()
     add_activity(db, ctx, f"Tenant '{tenant.full_name}' added")
     return tenant


def update_tenant(db: Session, ctx: SessionContext, tenant_id: int, **fields) -> Tenant:
     tenant = get_tenant(db, ctx, tenant_id)
     for key, value in fields.items():
          if value is not None:
               setattr(tenant, key, value)
     db.flush()
     add_activity(db, ctx, f"Tenant '{tenant.full_name}' updated")
     return tenant


def deactivate_tenant(db: Session, ctx: SessionContext, tenant_id: int) -> Tenant:
     tenant = get_tenant(db, ctx, tenant_id)
     tenant.is_active = False
     db.flush()
     add_activity(db, ctx, f"Tenant '{tenant.full_name}' deactivated")
     return tenant


def count_active_tenants(db: Session, ctx: SessionContext) -> int:
     return (
          db.query(func.count(Tenant.id))
          .filter(Tenant.user_id == ctx.user_id, Tenant.is_active.is_(True))
          .scalar()
     ) or 0


# ---------------------------------------------------------------------------
# Lease agreements
# ---------------------------------------------------------------------------

def get_agreement(db: Session, ctx: SessionContext, agreement_id: int) -> LeaseAgreement:
     agreement = (
          db.query(LeaseAgreement)
          .options(joinedload(LeaseAgreement.shop), joinedload(LeaseAgreement.tenant))
          .filter(LeaseAgreement.id == agreement_id, LeaseAgreement.user_id == ctx.user_id)
          .first()
     )
     if not agreement:
          raise NotFoundError(f"Lease agreement with ID {agreement_id} not found")
     return agreement


def list_agreements(db: Session, ctx: SessionContext, status: Optional[AgreementStatus] = None) -> List[LeaseAgreement]:
     query = db.query(LeaseAgreement).filter(LeaseAgreement.user_id == ctx.user_id)
     if status is not None:
          query = query.filter(LeaseAgreement.status == status)
     return query.order_by(LeaseAgreement.start_date.desc(), LeaseAgreement.id.desc()).all()


def active_agreements(db: Session, ctx: SessionContext) -> List[LeaseAgreement]:
     """ACTIVE agreements with their shop and tenant loaded."""
     return (
          db.query(LeaseAgreement)
          .options(joinedload(LeaseAgreement.shop), joinedload(LeaseAgreement.tenant))
          .filter(LeaseAgreement.user_id == ctx.user_id, LeaseAgreement.status == AgreementStatus.ACTIVE)
          .order_by(LeaseAgreement.id)
          .all()
     )


def active_agreement_for_shop(db: Session, shop_id: int, tenant_id: Optional[int] = None) -> Optional[LeaseAgreement]:
     query = db.query(LeaseAgreement).filter(
          LeaseAgreement.shop_id == shop_id,
          LeaseAgreement.status == AgreementStatus.ACTIVE
     )
     if tenant_id is not None:
          query = query.filter(LeaseAgreement.tenant_id == tenant_id)
     return query.first()


def agreements_expiring_before(db: Session, ctx: SessionContext, cutoff: date) -> List[LeaseAgreement]:
     """ACTIVE agreements whose end date is strictly before cutoff."""
     return (
          db.query(LeaseAgreement)
          .filter(
               LeaseAgreement.user_id == ctx.user_id,
               LeaseAgreement.status == AgreementStatus.ACTIVE,
               LeaseAgreement.end_date < cutoff
          )
          .order_by(LeaseAgreement.end_date)
          .all()
     )


def agreement_number_taken(db: Session, agreement_number: str) -> bool:
     return db.query(LeaseAgreement.id).filter(LeaseAgreement.agreement_number == agreement_number).first() is not None


# ---------------------------------------------------------------------------
# Rent payments
# ---------------------------------------------------------------------------

def payments_for_period(db: Session, agreement_id: int, month: int, year: int) -> List[RentPayment]:
     return (
          db.query(RentPayment)
          .filter(
               RentPayment.agreement_id == agreement_id,
               RentPayment.month == month,
               RentPayment.year == year
          )
          .order_by(RentPayment.id)
          .all()
     )


def payment_exists_for_period(db: Session, agreement_id: int, month: int, year: int) -> bool:
     return (
          db.query(RentPayment.id)
          .filter(
               RentPayment.agreement_id == agreement_id,
               RentPayment.month == month,
               RentPayment.year == year
          )
          .first()
     ) is not None


def total_paid_for_period(db: Session, agreement_id: int, month: int, year: int) -> Decimal:
     total = (
          db.query(func.sum(RentPayment.amount))
          .filter(
               RentPayment.agreement_id == agreement_id,
               RentPayment.month == month,
               RentPayment.year == year
          )
          .scalar()
     )
     return to_money(total)


def paid_by_period(db: Session, agreement_id: int) -> Dict[tuple, Decimal]:
     """{(year, month): total paid} for every period the agreement has payments in."""
     rows = (
          db.query(RentPayment.year, RentPayment.month, func.sum(RentPayment.amount))
          .filter(RentPayment.agreement_id == agreement_id)
          .group_by(RentPayment.year, RentPayment.month)
          .all()
     )
     return {(year, month): to_money(total) for year, month, total in rows}


def yearly_total(db: Session, agreement_id: int, year: int) -> Decimal:
     total = (
          db.query(func.sum(RentPayment.amount))
          .filter(RentPayment.agreement_id == agreement_id, RentPayment.year == year)
          .scalar()
     )
     return to_money(total)


def payments_for_agreement(db: Session, agreement_id: int) -> List[RentPayment]:
     """Payment history, newest period first."""
     return (
          db.query(RentPayment)
          .filter(RentPayment.agreement_id == agreement_id)
          .order_by(RentPayment.year.desc(), RentPayment.month.desc(), RentPayment.id.desc())
          .all()
     )


def revenue_for_period(db: Session, ctx: SessionContext, month: int, year: int) -> Decimal:
     """Sum of every payment settling (month, year), across all of the user's agreements."""
     total = (
          db.query(func.sum(RentPayment.amount))
          .join(LeaseAgreement, RentPayment.agreement_id == LeaseAgreement.id)
          .filter(
               LeaseAgreement.user_id == ctx.user_id,
               RentPayment.month == month,
               RentPayment.year == year
          )
          .scalar()
     )
     return to_money(total)


def payments_between(db: Session, ctx: SessionContext, start: date, end: date) -> List[RentPayment]:
     return (
          db.query(RentPayment)
          .join(LeaseAgreement, RentPayment.agreement_id == LeaseAgreement.id)
          .filter(
               LeaseAgreement.user_id == ctx.user_id,
               RentPayment.payment_date >= start,
               RentPayment.payment_date <= end
          )
          .order_by(RentPayment.payment_date)
          .all()
     )


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

def create_expense(db: Session, ctx: SessionContext, shop_id: Optional[int] = None, **fields) -> Expense:
     if shop_id is not None:
          get_shop(db, ctx, shop_id, include_inactive=True)
     expense = Expense(shop_id=shop_id, **fields)
     db.add(expense)
     db.flush()
     add_activity(db, ctx, f"Expense of {to_money(expense.amount)} recorded ({expense.category.value})")
     return expense


def list_expenses(db: Session, shop_id: Optional[int] = None) -> List[Expense]:
     query = db.query(Expense)
     if shop_id is not None:
          query = query.filter(Expense.shop_id == shop_id)
     return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()


def expenses_between(db: Session, start: date, end: date, shop_id: Optional[int] = None) -> List[Expense]:
     query = db.query(Expense).filter(Expense.expense_date >= start, Expense.expense_date <= end)
     if shop_id is not None:
          query = query.filter(Expense.shop_id == shop_id)
     return query.order_by(Expense.expense_date).all()


def total_expenses_between(db: Session, start: date, end: date, shop_id: Optional[int] = None) -> Decimal:
     query = db.query(func.sum(Expense.amount)).filter(Expense.expense_date >= start, Expense.expense_date <= end)
     if shop_id is not None:
          query = query.filter(Expense.shop_id == shop_id)
     return to_money(query.scalar())


def expenses_by_category(db: Session, start: date, end: date, shop_id: Optional[int] = None) -> Dict[ExpenseCategory, Decimal]:
     query = (
          db.query(Expense.category, func.sum(Expense.amount))
          .filter(Expense.expense_date >= start, Expense.expense_date <= end)
     )
     if shop_id is not None:
          query = query.filter(Expense.shop_id == shop_id)
     rows = query.group_by(Expense.category).all()
     return {category: to_money(total) for category, total in rows}


# ---------------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------------

def add_activity(db: Session, ctx: SessionContext, message: str, timestamp: Optional[datetime] = None) -> ActivityLog:
     entry = ActivityLog(user_id=ctx.user_id, message=message, timestamp=timestamp or datetime.now())
     db.add(entry)
     db.flush()
     logger.info("Activity user=%s: %s", ctx.user_id, message)
     return entry


def recent_activities(db: Session, ctx: SessionContext, limit: int = None) -> List[ActivityLog]:
     return (
          db.query(ActivityLog)
          .filter(ActivityLog.user_id == ctx.user_id)
          .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
          .limit(limit or config.ACTIVITY_RECENT_LIMIT)
          .all()
     )


def activities_between(db: Session, ctx: SessionContext, start: datetime, end: datetime) -> List[ActivityLog]:
     return (
          db.query(ActivityLog)
          .filter(
               ActivityLog.user_id == ctx.user_id,
               ActivityLog.timestamp >= start,
               ActivityLog.timestamp <= end
          )
          .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
          .all()
     )
