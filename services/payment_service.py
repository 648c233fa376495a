"""
Payment Service - records rent payments against the rent ledger.

A payment settles one (month, year) period of an agreement. It is accepted only
when 0 < amount <= remaining for that period; the check and the insert run
under the agreement's lock so two concurrent payments cannot both pass it.
Rejected payments never reach the database.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from models import PaymentMethod, PaymentStatus, RentPayment
from services import entity_store
from services.entity_store import SessionContext, to_money
from services.exceptions import ValidationFailure, guard_storage
from services.locks import record_lock
from services.rent_ledger import is_late_payment, in_term, period_balance, period_label

logger = logging.getLogger(__name__)


@guard_storage
def record_payment(
     db: Session,
     ctx: SessionContext,
     agreement_id: int,
     amount: Decimal,
     payment_date: Optional[date] = None,
     method: PaymentMethod = PaymentMethod.CASH,
     reference: Optional[str] = None,
     notes: Optional[str] = None,
     month: Optional[int] = None,
     year: Optional[int] = None,
     late_fee: Decimal = Decimal("0")
) -> RentPayment:
     """
     Record a rent payment for an agreement.

     The period defaults to the month of payment_date. The stored row is
     stamped PAID when it settles the period, PARTIAL otherwise.

     Raises:
          NotFoundError: If the agreement does not exist for this user
          ValidationFailure: If the amount is not positive, exceeds the
               period's remaining rent, or the period is outside the lease term
     """
     amount = to_money(amount)
     late_fee = to_money(late_fee)
     payment_date = payment_date or date.today()
     month = payment_date.month if month is None else month
     year = payment_date.year if year is None else year

     if amount <= 0:
          raise ValidationFailure("Payment amount must be greater than zero", "INVALID_AMOUNT")
     if late_fee < 0:
          raise ValidationFailure("Late fee cannot be negative", "INVALID_LATE_FEE")
     if not 1 <= month <= 12:
          raise ValidationFailure("Month must be between 1 and 12", "INVALID_PERIOD")

     with record_lock("agreement", agreement_id):
          agreement = entity_store.get_agreement(db, ctx, agreement_id)
          if not in_term(agreement, month, year):
               raise ValidationFailure(
                    f"{period_label(month, year)} is outside the lease term",
                    "PERIOD_OUT_OF_TERM"
               )

          balance = period_balance(db, agreement, month, year)
          if amount > balance.remaining:
               logger.warning(
                    "Payment rejected: %s exceeds remaining %s for agreement %s %s",
                    amount, balance.remaining, agreement_id, period_label(month, year)
               )
               raise ValidationFailure(
                    f"Payment of {amount} exceeds the remaining {balance.remaining} for {period_label(month, year)}",
                    "PAYMENT_EXCEEDS_REMAINING"
               )

          payment = RentPayment(
               agreement_id=agreement.id,
               amount=amount,
               payment_date=payment_date,
               month=month,
               year=year,
               payment_method=method,
               reference_number=reference,
               notes=notes,
               is_late=is_late_payment(payment_date, agreement.rent_due_day),
               late_fee=late_fee,
               status=PaymentStatus.PARTIAL if amount < balance.remaining else PaymentStatus.PAID
          )
          db.add(payment)
          db.flush()
          entity_store.add_activity(
               db, ctx,
               f"Payment of {amount} received for agreement {agreement.agreement_number} ({period_label(month, year)})"
          )
          db.commit()

     logger.info("Recorded payment id=%s agreement=%s amount=%s", payment.id, agreement_id, amount)
     return payment


@guard_storage
def payment_history(db: Session, ctx: SessionContext, agreement_id: int) -> List[RentPayment]:
     agreement = entity_store.get_agreement(db, ctx, agreement_id)
     return entity_store.payments_for_agreement(db, agreement.id)


@guard_storage
def yearly_total(db: Session, ctx: SessionContext, agreement_id: int, year: int) -> Decimal:
     agreement = entity_store.get_agreement(db, ctx, agreement_id)
     return entity_store.yearly_total(db, agreement.id, year)
