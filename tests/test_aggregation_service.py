from datetime import date, datetime
from decimal import Decimal

from models import ExpenseCategory
from services import entity_store
from services.aggregation_service import (
     days_between,
     due_date_for,
     get_dashboard_stats,
     get_rent_due_reminders,
)
from services.payment_service import record_payment

TERM = dict(start=date(2026, 1, 1), end=date(2026, 12, 31))


def _expense(db, ctx, amount, on, shop_id=None):
     entity_store.create_expense(
          db, ctx,
          shop_id=shop_id,
          category=ExpenseCategory.MAINTENANCE,
          amount=Decimal(amount),
          description="Upkeep",
          expense_date=on
     )
     db.commit()


def test_dashboard_stats(db, ctx, make_shop, make_tenant, make_agreement):
     now = datetime(2026, 10, 19, 12, 0)
     make_shop()
     make_shop()
     first = make_agreement(**TERM)
     second = make_agreement(**TERM)
     make_tenant()
     retired = make_tenant()
     entity_store.deactivate_tenant(db, ctx, retired.id)
     hidden = make_shop()
     entity_store.deactivate_shop(db, ctx, hidden.id)
     db.commit()

     record_payment(db, ctx, first.id, Decimal("10000"), payment_date=date(2026, 10, 3))
     record_payment(db, ctx, second.id, Decimal("10000"), payment_date=date(2026, 10, 4))
     # Settles September, so it is not October revenue
     record_payment(db, ctx, second.id, Decimal("700"), payment_date=date(2026, 10, 4), month=9, year=2026)

     _expense(db, ctx, "3000", date(2026, 10, 1))
     _expense(db, ctx, "2000", date(2026, 9, 25), shop_id=first.shop_id)
     _expense(db, ctx, "999", date(2026, 8, 1))

     stats = get_dashboard_stats(db, ctx, now=now)

     assert stats.total_shops == 4
     assert stats.vacant_shops == 2
     assert stats.occupied_shops == 2
     assert stats.active_tenants == 3
     assert stats.monthly_revenue == Decimal("20000")
     assert stats.monthly_expenses == Decimal("5000")
     assert stats.net_profit == Decimal("15000")


def test_empty_store_gives_zero_stats(db, ctx):
     stats = get_dashboard_stats(db, ctx, now=datetime(2026, 10, 19))

     assert stats.total_shops == 0
     assert stats.monthly_revenue == Decimal("0")
     assert stats.net_profit == Decimal("0")


def test_overdue_reminder_days(db, ctx, make_agreement):
     agreement = make_agreement(rent_due_day=5, **TERM)

     reminders = get_rent_due_reminders(db, ctx, now=datetime(2026, 10, 10, 9, 30))

     assert len(reminders) == 1
     reminder = reminders[0]
     assert reminder.agreement.id == agreement.id
     assert reminder.shop.id == agreement.shop_id
     assert reminder.tenant.id == agreement.tenant_id
     assert reminder.due_date == date(2026, 10, 5)
     assert reminder.days_overdue == 5
     assert reminder.amount_due == Decimal("10000")
     assert reminder.period == "October 2026"


def test_no_reminder_until_due_day_has_ended(db, ctx, make_agreement):
     make_agreement(rent_due_day=5, **TERM)

     assert get_rent_due_reminders(db, ctx, now=datetime(2026, 10, 5, 23, 59)) == []
     assert len(get_rent_due_reminders(db, ctx, now=datetime(2026, 10, 6, 0, 0))) == 1


def test_partial_period_policy(db, ctx, make_agreement):
     agreement = make_agreement(rent_due_day=5, **TERM)
     record_payment(db, ctx, agreement.id, Decimal("2500"), payment_date=date(2026, 10, 2))
     now = datetime(2026, 10, 10)

     assert get_rent_due_reminders(db, ctx, now=now, include_partial=False) == []

     reminders = get_rent_due_reminders(db, ctx, now=now, include_partial=True)
     assert len(reminders) == 1
     assert reminders[0].amount_due == Decimal("7500")


def test_paid_period_never_reminds(db, ctx, make_agreement):
     agreement = make_agreement(rent_due_day=5, **TERM)
     record_payment(db, ctx, agreement.id, Decimal("10000"), payment_date=date(2026, 10, 9))

     assert get_rent_due_reminders(db, ctx, now=datetime(2026, 10, 20), include_partial=True) == []


def test_upcoming_window(db, ctx, make_agreement):
     make_agreement(rent_due_day=5, **TERM)
     now = datetime(2026, 10, 2, 8, 0)

     assert get_rent_due_reminders(db, ctx, now=now, upcoming_window_days=0) == []
     reminders = get_rent_due_reminders(db, ctx, now=now, upcoming_window_days=5)
     assert [r.days_overdue for r in reminders] == [-3]


def test_reminders_skip_agreements_outside_term(db, ctx, make_agreement):
     make_agreement(rent_due_day=5, start=date(2026, 11, 1), end=date(2027, 10, 31))
     make_agreement(rent_due_day=5, start=date(2025, 1, 1), end=date(2026, 9, 30))

     assert get_rent_due_reminders(db, ctx, now=datetime(2026, 10, 10)) == []


def test_reminders_most_overdue_first(db, ctx, make_agreement):
     late = make_agreement(rent_due_day=1, **TERM)
     later = make_agreement(rent_due_day=8, **TERM)

     reminders = get_rent_due_reminders(db, ctx, now=datetime(2026, 10, 12))

     assert [r.agreement.id for r in reminders] == [late.id, later.id]
     assert [r.days_overdue for r in reminders] == [11, 4]


def test_due_day_clamped_to_month_length():
     assert due_date_for(31, 2, 2026) == date(2026, 2, 28)
     assert due_date_for(31, 2, 2024) == date(2024, 2, 29)
     assert due_date_for(15, 2, 2026) == date(2026, 2, 15)


def test_days_between_floors_partial_days():
     assert days_between(datetime(2026, 10, 10, 23, 59), date(2026, 10, 5)) == 5
     assert days_between(datetime(2026, 10, 2, 1, 0), date(2026, 10, 5)) == -3
