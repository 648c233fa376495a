import threading
import time
from datetime import date, datetime
from decimal import Decimal

import pytest

from models import RentPayment, Shop
from services import entity_store
from services.aggregation_service import get_dashboard_stats
from services.change_feed import ChangeFeed
from services.payment_service import record_payment


@pytest.fixture
def feed(session_factory):
     change_feed = ChangeFeed(session_factory)
     yield change_feed
     change_feed.close()


def _count_shops(session):
     return session.query(Shop).count()


def test_publishes_only_after_commit(feed, session_factory, ctx):
     received = []
     feed.subscribe({"shops"}, _count_shops, received.append)

     session = session_factory()
     entity_store.create_shop(session, ctx, shop_number="F-1")
     feed.wait_idle()
     assert received == []

     session.commit()
     feed.wait_idle()
     assert received == [1]
     session.close()


def test_rollback_discards_changes(feed, session_factory, ctx):
     received = []
     feed.subscribe({"shops"}, _count_shops, received.append)

     session = session_factory()
     entity_store.create_shop(session, ctx, shop_number="F-1")
     session.rollback()
     session.commit()
     feed.wait_idle()

     assert received == []
     session.close()


def test_unrelated_tables_do_not_notify(feed, session_factory, ctx):
     received = []
     feed.subscribe({"shops"}, _count_shops, received.append)

     session = session_factory()
     entity_store.create_tenant(session, ctx, full_name="Nadia", phone_number="555")
     session.commit()
     feed.wait_idle()

     assert received == []
     session.close()


def test_cancel_stops_delivery(feed, session_factory, ctx):
     received = []
     subscription = feed.subscribe({"shops"}, _count_shops, received.append)
     assert feed.subscriber_count == 1

     subscription.cancel()
     session = session_factory()
     entity_store.create_shop(session, ctx, shop_number="F-1")
     session.commit()
     feed.wait_idle()

     assert received == []
     assert feed.subscriber_count == 0
     session.close()


def test_failing_subscriber_does_not_break_others(feed, session_factory, ctx):
     received = []

     def broken(_):
          raise RuntimeError("boom")

     feed.subscribe({"shops"}, _count_shops, broken)
     feed.subscribe({"shops"}, _count_shops, received.append)

     session = session_factory()
     entity_store.create_shop(session, ctx, shop_number="F-1")
     session.commit()
     feed.wait_idle()

     assert received == [1]
     assert session.query(Shop).count() == 1
     session.close()


def test_dashboard_projection_recomputed(feed, session_factory, ctx):
     received = []
     feed.subscribe(
          {"shops", "tenants"},
          lambda session: get_dashboard_stats(session, ctx, now=datetime(2026, 10, 19)),
          received.append
     )

     session = session_factory()
     entity_store.create_shop(session, ctx, shop_number="F-1")
     session.commit()
     feed.wait_idle()
     entity_store.create_tenant(session, ctx, full_name="Omar", phone_number="555")
     session.commit()
     feed.wait_idle()

     assert [s.total_shops for s in received] == [1, 1]
     assert [s.active_tenants for s in received] == [0, 1]
     assert feed.snapshot(lambda s: get_dashboard_stats(s, ctx).vacant_shops) == 1
     session.close()


def test_slow_subscriber_does_not_delay_payment(feed, db, ctx, make_agreement):
     agreement = make_agreement()
     release = threading.Event()
     received = []

     def slow_projection(session):
          release.wait(5)
          return session.query(RentPayment).count()

     feed.subscribe({"rent_payments"}, slow_projection, received.append)

     started = time.monotonic()
     payment = record_payment(db, ctx, agreement.id, Decimal("100"), payment_date=date(2024, 1, 3))
     elapsed = time.monotonic() - started

     assert payment.id is not None
     assert elapsed < 2
     assert received == []

     release.set()
     feed.wait_idle()
     assert received == [1]


def test_close_stops_listening(session_factory, ctx):
     feed = ChangeFeed(session_factory)
     received = []
     feed.subscribe({"shops"}, _count_shops, received.append)
     feed.close()

     session = session_factory()
     entity_store.create_shop(session, ctx, shop_number="F-1")
     session.commit()
     feed.wait_idle()

     assert received == []
     session.close()
