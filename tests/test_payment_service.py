from datetime import date
from decimal import Decimal

import pytest

from models import PaymentMethod, PaymentStatus, RentPayment
from services.exceptions import NotFoundError, ValidationFailure
from services.payment_service import payment_history, record_payment, yearly_total
from services.rent_ledger import is_late_payment


def test_payment_defaults_to_payment_date_period(db, ctx, make_agreement):
     agreement = make_agreement()

     payment = record_payment(
          db, ctx, agreement.id, Decimal("10000"),
          payment_date=date(2024, 4, 3),
          method=PaymentMethod.BANK_TRANSFER,
          reference="TRX-1"
     )

     assert (payment.month, payment.year) == (4, 2024)
     assert payment.status == PaymentStatus.PAID
     assert payment.payment_method == PaymentMethod.BANK_TRANSFER
     assert payment.reference_number == "TRX-1"
     assert payment.is_late is False


def test_partial_payment_is_stamped_partial(db, ctx, make_agreement):
     agreement = make_agreement()

     first = record_payment(db, ctx, agreement.id, Decimal("4000"), payment_date=date(2024, 4, 3))
     second = record_payment(db, ctx, agreement.id, Decimal("6000"), payment_date=date(2024, 4, 20))

     assert first.status == PaymentStatus.PARTIAL
     assert second.status == PaymentStatus.PAID


def test_late_flag_and_caller_supplied_fee(db, ctx, make_agreement):
     agreement = make_agreement(rent_due_day=5)

     payment = record_payment(
          db, ctx, agreement.id, Decimal("10000"),
          payment_date=date(2024, 4, 6),
          late_fee=Decimal("250")
     )

     assert payment.is_late is True
     assert payment.late_fee == Decimal("250")


def test_is_late_payment_boundary():
     assert is_late_payment(date(2024, 4, 5), 5) is False
     assert is_late_payment(date(2024, 4, 6), 5) is True


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
def test_non_positive_amount_rejected(db, ctx, make_agreement, amount):
     agreement = make_agreement()

     with pytest.raises(ValidationFailure):
          record_payment(db, ctx, agreement.id, amount, payment_date=date(2024, 4, 3))
     assert db.query(RentPayment).count() == 0


def test_negative_late_fee_rejected(db, ctx, make_agreement):
     agreement = make_agreement()

     with pytest.raises(ValidationFailure):
          record_payment(db, ctx, agreement.id, Decimal("10"), payment_date=date(2024, 4, 3), late_fee=Decimal("-1"))


def test_period_outside_term_rejected(db, ctx, make_agreement):
     agreement = make_agreement(start=date(2024, 1, 1), end=date(2024, 12, 31))

     with pytest.raises(ValidationFailure) as excinfo:
          record_payment(db, ctx, agreement.id, Decimal("10"), payment_date=date(2025, 1, 3))
     assert excinfo.value.error_code == "PERIOD_OUT_OF_TERM"


@pytest.mark.parametrize("month", [0, 13])
def test_month_outside_calendar_rejected(db, ctx, make_agreement, month):
     agreement = make_agreement()

     with pytest.raises(ValidationFailure) as excinfo:
          record_payment(db, ctx, agreement.id, Decimal("10"), payment_date=date(2024, 4, 3), month=month)
     assert excinfo.value.error_code == "INVALID_PERIOD"
     assert db.query(RentPayment).count() == 0


def test_unknown_agreement(db, ctx):
     with pytest.raises(NotFoundError):
          record_payment(db, ctx, 404, Decimal("10"), payment_date=date(2024, 4, 3))


def test_history_and_yearly_total(db, ctx, make_agreement):
     agreement = make_agreement(start=date(2024, 1, 1), end=date(2025, 12, 31))
     record_payment(db, ctx, agreement.id, Decimal("10000"), payment_date=date(2024, 1, 4))
     record_payment(db, ctx, agreement.id, Decimal("3000"), payment_date=date(2024, 12, 4))
     record_payment(db, ctx, agreement.id, Decimal("9000"), payment_date=date(2025, 1, 4))

     history = payment_history(db, ctx, agreement.id)

     assert [(p.year, p.month) for p in history] == [(2025, 1), (2024, 12), (2024, 1)]
     assert yearly_total(db, ctx, agreement.id, 2024) == Decimal("13000")
     assert yearly_total(db, ctx, agreement.id, 2025) == Decimal("9000")
     assert yearly_total(db, ctx, agreement.id, 2026) == Decimal("0")
