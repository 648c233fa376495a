from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import enable_sqlite_foreign_keys, get_change_feed, get_session
from main import app
from models import Base, User
from services import entity_store
from services.auth_service import hash_password
from services.change_feed import ChangeFeed
from services.entity_store import SessionContext
from services.lease_service import LeaseService

OWNER_PASSWORD = "Str0ng#Pass"


@pytest.fixture
def engine():
     eng = create_engine(
          "sqlite://",
          connect_args={"check_same_thread": False},
          poolclass=StaticPool,
     )
     enable_sqlite_foreign_keys(eng)
     Base.metadata.create_all(eng)
     yield eng
     eng.dispose()


@pytest.fixture
def session_factory(engine):
     return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
     session = session_factory()
     yield session
     session.close()


@pytest.fixture
def user(db):
     owner = User(
          username="owner",
          password_hash=hash_password(OWNER_PASSWORD),
          full_name="Shop Owner",
          is_active=True,
     )
     db.add(owner)
     db.commit()
     return owner


@pytest.fixture
def ctx(user):
     return SessionContext(user_id=user.id, username=user.username)


@pytest.fixture
def make_shop(db, ctx):
     counter = {"n": 0}

     def _make(monthly_rent="10000", **fields):
          counter["n"] += 1
          fields.setdefault("shop_number", f"S-{counter['n']}")
          shop = entity_store.create_shop(db, ctx, monthly_rent=Decimal(monthly_rent), **fields)
          db.commit()
          return shop

     return _make


@pytest.fixture
def make_tenant(db, ctx):
     counter = {"n": 0}

     def _make(**fields):
          counter["n"] += 1
          fields.setdefault("full_name", f"Tenant {counter['n']}")
          fields.setdefault("phone_number", f"555-000{counter['n']}")
          tenant = entity_store.create_tenant(db, ctx, **fields)
          db.commit()
          return tenant

     return _make


@pytest.fixture
def make_agreement(db, ctx, make_shop, make_tenant):
     def _make(shop=None, tenant=None, start=date(2024, 1, 1), end=date(2024, 12, 31), rent_due_day=5, **fields):
          shop = shop or make_shop()
          tenant = tenant or make_tenant()
          return LeaseService.create_agreement(
               db, ctx,
               shop_id=shop.id,
               tenant_id=tenant.id,
               start_date=start,
               end_date=end,
               rent_due_day=rent_due_day,
               **fields
          )

     return _make


@pytest.fixture
def change_feed(session_factory):
     feed = ChangeFeed(session_factory)
     yield feed
     feed.close()


@pytest.fixture
def client(session_factory, change_feed):
     def override_get_session():
          session = session_factory()
          try:
               yield session
               session.commit()
          except Exception:
               session.rollback()
               raise
          finally:
               session.close()

     app.dependency_overrides[get_session] = override_get_session
     app.dependency_overrides[get_change_feed] = lambda: change_feed
     yield TestClient(app)
     app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
     client.post("/api/auth/signup", json={"username": "landlord", "password": OWNER_PASSWORD, "full_name": "Land Lord"})
     response = client.post("/api/auth/login", json={"username": "landlord", "password": OWNER_PASSWORD})
     assert response.status_code == 200
     return {"Authorization": f"Bearer {response.json()['token']}"}
