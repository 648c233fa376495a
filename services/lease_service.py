"""
Lease Service - business logic for the lease agreement lifecycle.

A shop may hold at most one ACTIVE agreement. Every operation that can create
or end an ACTIVE agreement runs under the shop's lock and commits the agreement
row and the shop status flip together, so a failure leaves neither behind.
"""
import logging
import time
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from models import AgreementStatus, LeaseAgreement, TERMINAL_STATUSES
from services import entity_store
from services.entity_store import SessionContext
from services.exceptions import ConflictError, NotFoundError, ValidationFailure, guard_storage
from services.locks import record_lock

logger = logging.getLogger(__name__)


def _check_rent_due_day(rent_due_day: int) -> None:
     if not 1 <= rent_due_day <= 31:
          raise ValidationFailure("Rent due day must be between 1 and 31", "INVALID_RENT_DUE_DAY")


def _check_term(start_date: date, end_date: date) -> None:
     if end_date < start_date:
          raise ValidationFailure("End date cannot be before start date", "INVALID_TERM")


def _generate_agreement_number(db: Session) -> str:
     stamp = int(time.time() * 1000)
     while entity_store.agreement_number_taken(db, f"AG-{stamp}"):
          stamp += 1
     return f"AG-{stamp}"


class LeaseService:
     """Service class for lease agreement business logic."""

     @staticmethod
     @guard_storage
     def create_agreement(
          db: Session,
          ctx: SessionContext,
          shop_id: int,
          tenant_id: int,
          start_date: date,
          end_date: date,
          monthly_rent: Optional[Decimal] = None,
          security_deposit: Optional[Decimal] = None,
          rent_due_day: Optional[int] = None,
          agreement_number: Optional[str] = None,
          **terms
     ) -> LeaseAgreement:
          """
          Create an ACTIVE agreement and mark its shop OCCUPIED in one transaction.

          Args:
               db: SQLAlchemy database session
               ctx: caller's session context
               shop_id: ID of the shop being leased
               tenant_id: ID of the tenant
               start_date: first day of the lease
               end_date: last day of the lease
               monthly_rent: defaults to the shop's monthly rent
               security_deposit: defaults to the shop's security deposit
               rent_due_day: day of month rent is due (1-31, default 5)
               agreement_number: unique number (generated when omitted)
               **terms: payment_terms, maintenance_charges, utilities_included,
                    notice_period_days, agreement_document_path, notes

          Returns:
               Created LeaseAgreement object

          Raises:
               NotFoundError: If the shop or tenant doesn't exist or is inactive
               ConflictError: If the shop already has an ACTIVE agreement or the
                    agreement number is taken
               ValidationFailure: If the due day or the term is invalid
          """
          rent_due_day = config.DEFAULT_RENT_DUE_DAY if rent_due_day is None else rent_due_day
          _check_rent_due_day(rent_due_day)
          _check_term(start_date, end_date)

          with record_lock("shop", shop_id):
               shop = entity_store.get_shop(db, ctx, shop_id)
               tenant = entity_store.get_tenant(db, ctx, tenant_id)
               if not tenant.is_active:
                    raise NotFoundError(f"Tenant with ID {tenant_id} is not active")

               existing = entity_store.active_agreement_for_shop(db, shop_id)
               if existing:
                    logger.warning("Shop %s already leased by agreement %s", shop_id, existing.agreement_number)
                    raise ConflictError(
                         f"Shop '{shop.shop_number}' already has an active agreement ({existing.agreement_number})",
                         "SHOP_ALREADY_LEASED"
                    )

               agreement_number = agreement_number or _generate_agreement_number(db)
               if entity_store.agreement_number_taken(db, agreement_number):
                    raise ConflictError(f"Agreement number {agreement_number} already exists", "DUPLICATE_AGREEMENT_NUMBER")

               agreement = LeaseAgreement(
                    user_id=ctx.user_id,
                    agreement_number=agreement_number,
                    shop_id=shop.id,
                    tenant_id=tenant.id,
                    start_date=start_date,
                    end_date=end_date,
                    monthly_rent=shop.monthly_rent if monthly_rent is None else monthly_rent,
                    security_deposit=shop.security_deposit if security_deposit is None else security_deposit,
                    rent_due_day=rent_due_day,
                    status=AgreementStatus.ACTIVE,
                    **terms
               )
               try:
                    db.add(agreement)
                    shop.mark_occupied()
                    db.flush()
                    entity_store.add_activity(
                         db, ctx,
                         f"Agreement {agreement_number} created for shop '{shop.shop_number}' with {tenant.full_name}"
                    )
                    db.commit()
               except IntegrityError as exc:
                    db.rollback()
                    logger.warning("Agreement insert for shop %s hit a constraint: %s", shop_id, exc.orig)
                    raise ConflictError(
                         f"Shop '{shop.shop_number}' already has an active agreement or number {agreement_number} is taken",
                         "AGREEMENT_CONFLICT"
                    ) from exc

          logger.info("Created agreement %s (id=%s) for shop %s", agreement_number, agreement.id, shop_id)
          return agreement

     @staticmethod
     @guard_storage
     def update_status(
          db: Session,
          ctx: SessionContext,
          agreement_id: int,
          status: AgreementStatus
     ) -> LeaseAgreement:
          """
          Move an agreement to a new status.

          Ending an agreement (EXPIRED, TERMINATED, RENEWED) returns its shop to
          VACANT; re-activating one requires the shop to be free.
          """
          agreement = entity_store.get_agreement(db, ctx, agreement_id)
          if agreement.status == status:
               return agreement

          with record_lock("shop", agreement.shop_id):
               shop = agreement.shop
               if status == AgreementStatus.ACTIVE:
                    existing = entity_store.active_agreement_for_shop(db, agreement.shop_id)
                    if existing and existing.id != agreement.id:
                         raise ConflictError(
                              f"Shop '{shop.shop_number}' already has an active agreement ({existing.agreement_number})",
                              "SHOP_ALREADY_LEASED"
                         )
                    shop.mark_occupied()
               elif status in TERMINAL_STATUSES and agreement.status == AgreementStatus.ACTIVE:
                    shop.mark_vacant()

               previous = agreement.status
               agreement.status = status
               try:
                    db.flush()
                    entity_store.add_activity(
                         db, ctx,
                         f"Agreement {agreement.agreement_number} changed from {previous.value} to {status.value}"
                    )
                    db.commit()
               except IntegrityError as exc:
                    db.rollback()
                    raise ConflictError(
                         f"Shop '{shop.shop_number}' already has an active agreement",
                         "SHOP_ALREADY_LEASED"
                    ) from exc

          logger.info("Agreement %s status %s -> %s", agreement.agreement_number, previous.value, status.value)
          return agreement

     @staticmethod
     @guard_storage
     def renew_agreement(
          db: Session,
          ctx: SessionContext,
          agreement_id: int,
          new_end_date: date,
          monthly_rent: Optional[Decimal] = None,
          security_deposit: Optional[Decimal] = None,
          rent_due_day: Optional[int] = None,
          agreement_number: Optional[str] = None
     ) -> LeaseAgreement:
          """
          Supersede an ACTIVE agreement with a successor for the same shop and tenant.

          The successor starts the day after the current end date and inherits
          any terms not overridden. The old agreement becomes RENEWED and the
          shop stays OCCUPIED throughout.
          """
          current = entity_store.get_agreement(db, ctx, agreement_id)
          if current.status != AgreementStatus.ACTIVE:
               raise ValidationFailure(
                    f"Only active agreements can be renewed ({current.agreement_number} is {current.status.value})",
                    "AGREEMENT_NOT_ACTIVE"
               )

          start_date = current.end_date + timedelta(days=1)
          _check_term(start_date, new_end_date)
          rent_due_day = current.rent_due_day if rent_due_day is None else rent_due_day
          _check_rent_due_day(rent_due_day)

          agreement_number = agreement_number or _generate_agreement_number(db)
          with record_lock("shop", current.shop_id):
               if entity_store.agreement_number_taken(db, agreement_number):
                    raise ConflictError(f"Agreement number {agreement_number} already exists", "DUPLICATE_AGREEMENT_NUMBER")

               successor = LeaseAgreement(
                    user_id=ctx.user_id,
                    agreement_number=agreement_number,
                    shop_id=current.shop_id,
                    tenant_id=current.tenant_id,
                    start_date=start_date,
                    end_date=new_end_date,
                    monthly_rent=current.monthly_rent if monthly_rent is None else monthly_rent,
                    security_deposit=current.security_deposit if security_deposit is None else security_deposit,
                    rent_due_day=rent_due_day,
                    payment_terms=current.payment_terms,
                    maintenance_charges=current.maintenance_charges,
                    utilities_included=current.utilities_included,
                    notice_period_days=current.notice_period_days,
                    status=AgreementStatus.ACTIVE
               )
               try:
                    # The old row must leave ACTIVE before the successor is inserted
                    current.status = AgreementStatus.RENEWED
                    db.flush()
                    db.add(successor)
                    current.shop.mark_occupied()
                    db.flush()
                    entity_store.add_activity(
                         db, ctx,
                         f"Agreement {current.agreement_number} renewed as {agreement_number}"
                    )
                    db.commit()
               except IntegrityError as exc:
                    db.rollback()
                    raise ConflictError(f"Could not renew agreement {current.agreement_number}", "AGREEMENT_CONFLICT") from exc

          logger.info("Renewed agreement %s as %s", current.agreement_number, agreement_number)
          return successor

     @staticmethod
     @guard_storage
     def extend_agreement(db: Session, ctx: SessionContext, agreement_id: int, new_end_date: date) -> LeaseAgreement:
          """Change the end date of an agreement."""
          agreement = entity_store.get_agreement(db, ctx, agreement_id)
          _check_term(agreement.start_date, new_end_date)

          with record_lock("agreement", agreement_id):
               agreement.end_date = new_end_date
               db.flush()
               entity_store.add_activity(
                    db, ctx,
                    f"Agreement {agreement.agreement_number} end date set to {new_end_date.isoformat()}"
               )
               db.commit()
          return agreement

     @staticmethod
     @guard_storage
     def expire_agreements(db: Session, ctx: SessionContext, today: Optional[date] = None) -> List[LeaseAgreement]:
          """
          Mark every ACTIVE agreement that ended before today as EXPIRED.

          Returns:
               The agreements that were expired
          """
          today = today or date.today()
          expired = []
          for agreement in entity_store.agreements_expiring_before(db, ctx, today):
               expired.append(LeaseService.update_status(db, ctx, agreement.id, AgreementStatus.EXPIRED))
          if expired:
               logger.info("Expired %d agreement(s) ending before %s", len(expired), today)
          return expired

     @staticmethod
     @guard_storage
     def delete_agreement(db: Session, ctx: SessionContext, agreement_id: int) -> None:
          """Delete an agreement and its payments; an ACTIVE agreement frees its shop."""
          agreement = entity_store.get_agreement(db, ctx, agreement_id)
          number = agreement.agreement_number

          with record_lock("shop", agreement.shop_id):
               if agreement.status == AgreementStatus.ACTIVE:
                    agreement.shop.mark_vacant()
               db.delete(agreement)
               db.flush()
               entity_store.add_activity(db, ctx, f"Agreement {number} removed")
               db.commit()

          logger.info("Deleted agreement %s (id=%s)", number, agreement_id)
