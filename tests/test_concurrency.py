import threading
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from database import create_app_engine
from models import AgreementStatus, Base, LeaseAgreement, User
from services import entity_store
from services.entity_store import SessionContext
from services.exceptions import ConflictError, ValidationFailure
from services.lease_service import LeaseService
from services.payment_service import record_payment


@pytest.fixture
def file_sessions(tmp_path):
     engine = create_app_engine(f"sqlite:///{tmp_path / 'leasehub.db'}")
     Base.metadata.create_all(engine)
     yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
     engine.dispose()


@pytest.fixture
def owner(file_sessions):
     with file_sessions() as session:
          user = User(username="owner", password_hash="x", is_active=True)
          session.add(user)
          session.commit()
          return SessionContext(user_id=user.id, username=user.username)


def _race(file_sessions, action, workers=2):
     """Run action(session) on several threads at once; return results and errors."""
     barrier = threading.Barrier(workers)
     results, errors = [], []

     def run(index):
          with file_sessions() as session:
               barrier.wait()
               try:
                    results.append(action(session, index))
               except (ConflictError, ValidationFailure) as exc:
                    errors.append(exc)

     threads = [threading.Thread(target=run, args=(i,)) for i in range(workers)]
     for thread in threads:
          thread.start()
     for thread in threads:
          thread.join(10)
     return results, errors


def test_concurrent_payments_cannot_overpay(file_sessions, owner):
     with file_sessions() as session:
          shop = entity_store.create_shop(session, owner, shop_number="C-1", monthly_rent=Decimal("10000"))
          tenant = entity_store.create_tenant(session, owner, full_name="Lina", phone_number="555")
          session.commit()
          agreement = LeaseService.create_agreement(
               session, owner,
               shop_id=shop.id,
               tenant_id=tenant.id,
               start_date=date(2024, 1, 1),
               end_date=date(2024, 12, 31),
          )
          agreement_id = agreement.id

     results, errors = _race(
          file_sessions,
          lambda session, _: record_payment(
               session, owner, agreement_id, Decimal("6000"), payment_date=date(2024, 1, 3)
          )
     )

     assert len(results) == 1
     assert len(errors) == 1
     assert errors[0].error_code == "PAYMENT_EXCEEDS_REMAINING"
     with file_sessions() as session:
          assert entity_store.total_paid_for_period(session, agreement_id, 1, 2024) == Decimal("6000")


def test_concurrent_agreements_lease_a_shop_once(file_sessions, owner):
     with file_sessions() as session:
          shop = entity_store.create_shop(session, owner, shop_number="C-2", monthly_rent=Decimal("10000"))
          tenants = [
               entity_store.create_tenant(session, owner, full_name=f"Tenant {i}", phone_number=f"555-{i}")
               for i in range(2)
          ]
          session.commit()
          shop_id, tenant_ids = shop.id, [t.id for t in tenants]

     results, errors = _race(
          file_sessions,
          lambda session, index: LeaseService.create_agreement(
               session, owner,
               shop_id=shop_id,
               tenant_id=tenant_ids[index],
               start_date=date(2024, 1, 1),
               end_date=date(2024, 12, 31),
          )
     )

     assert len(results) == 1
     assert len(errors) == 1
     assert errors[0].error_code in ("SHOP_ALREADY_LEASED", "AGREEMENT_CONFLICT")
     with file_sessions() as session:
          active = session.query(LeaseAgreement).filter(
               LeaseAgreement.shop_id == shop_id,
               LeaseAgreement.status == AgreementStatus.ACTIVE
          ).count()
          assert active == 1
