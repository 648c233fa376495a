from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from models import ActivityLog, AgreementStatus, Expense, ExpenseCategory, LeaseAgreement, RentPayment, Shop, ShopStatus
from services import entity_store
from services.exceptions import ConflictError, NotFoundError, ValidationFailure
from services.lease_service import LeaseService
from services.payment_service import record_payment


def test_create_agreement_occupies_shop(db, ctx, make_shop, make_tenant):
     shop = make_shop(monthly_rent="12500", security_deposit=Decimal("25000"))
     tenant = make_tenant()

     agreement = LeaseService.create_agreement(
          db, ctx,
          shop_id=shop.id,
          tenant_id=tenant.id,
          start_date=date(2024, 1, 1),
          end_date=date(2024, 12, 31),
     )

     assert agreement.status == AgreementStatus.ACTIVE
     assert agreement.agreement_number.startswith("AG-")
     assert agreement.monthly_rent == Decimal("12500")
     assert agreement.security_deposit == Decimal("25000")
     assert agreement.rent_due_day == 5
     db.refresh(shop)
     assert shop.status == ShopStatus.OCCUPIED
     assert entity_store.active_agreement_for_shop(db, shop.id).id == agreement.id


def test_second_active_agreement_for_shop_conflicts(db, ctx, make_shop, make_tenant, make_agreement):
     shop = make_shop()
     make_agreement(shop=shop)

     with pytest.raises(ConflictError) as excinfo:
          make_agreement(shop=shop, tenant=make_tenant())

     assert excinfo.value.error_code == "SHOP_ALREADY_LEASED"
     active = db.query(LeaseAgreement).filter(
          LeaseAgreement.shop_id == shop.id,
          LeaseAgreement.status == AgreementStatus.ACTIVE
     ).count()
     assert active == 1


def test_storage_rejects_two_active_agreements_for_a_shop(db, ctx, make_shop, make_tenant, make_agreement):
     shop = make_shop()
     first = make_agreement(shop=shop)
     db.add(LeaseAgreement(
          user_id=ctx.user_id,
          agreement_number="RAW-2",
          shop_id=shop.id,
          tenant_id=first.tenant_id,
          start_date=date(2024, 1, 1),
          end_date=date(2024, 12, 31),
          monthly_rent=Decimal("1"),
          rent_due_day=1,
          status=AgreementStatus.ACTIVE,
     ))

     with pytest.raises(IntegrityError):
          db.flush()
     db.rollback()


def test_duplicate_agreement_number_conflicts(db, ctx, make_agreement):
     make_agreement(agreement_number="AG-2024-001")

     with pytest.raises(ConflictError) as excinfo:
          make_agreement(agreement_number="AG-2024-001")
     assert excinfo.value.error_code == "DUPLICATE_AGREEMENT_NUMBER"


@pytest.mark.parametrize("due_day", [0, 32, -1])
def test_rent_due_day_out_of_range(db, ctx, make_agreement, due_day):
     with pytest.raises(ValidationFailure):
          make_agreement(rent_due_day=due_day)


def test_end_before_start_is_rejected(db, ctx, make_agreement):
     with pytest.raises(ValidationFailure):
          make_agreement(start=date(2024, 6, 1), end=date(2024, 5, 31))


def test_missing_or_inactive_parties(db, ctx, make_shop, make_tenant):
     shop = make_shop()
     tenant = make_tenant()

     with pytest.raises(NotFoundError):
          LeaseService.create_agreement(db, ctx, shop_id=999, tenant_id=tenant.id,
                                               start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))

     entity_store.deactivate_tenant(db, ctx, tenant.id)
     db.commit()
     with pytest.raises(NotFoundError):
          LeaseService.create_agreement(db, ctx, shop_id=shop.id, tenant_id=tenant.id,
                                               start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))


@pytest.mark.parametrize("final_status", [AgreementStatus.TERMINATED, AgreementStatus.EXPIRED])
def test_ending_agreement_vacates_shop(db, ctx, make_shop, make_tenant, make_agreement, final_status):
     shop = make_shop()
     agreement = make_agreement(shop=shop)

     LeaseService.update_status(db, ctx, agreement.id, final_status)

     assert agreement.status == final_status
     assert shop.status == ShopStatus.VACANT

     # The shop can be leased again
     successor = make_agreement(shop=shop, tenant=make_tenant(), start=date(2025, 1, 1), end=date(2025, 12, 31))
     assert successor.status == AgreementStatus.ACTIVE
     assert shop.status == ShopStatus.OCCUPIED


def test_reactivation_requires_free_shop(db, ctx, make_shop, make_tenant, make_agreement):
     shop = make_shop()
     old = make_agreement(shop=shop)
     LeaseService.update_status(db, ctx, old.id, AgreementStatus.TERMINATED)
     make_agreement(shop=shop, tenant=make_tenant())

     with pytest.raises(ConflictError):
          LeaseService.update_status(db, ctx, old.id, AgreementStatus.ACTIVE)


def test_renewal_creates_successor(db, ctx, make_shop, make_agreement):
     shop = make_shop()
     agreement = make_agreement(shop=shop, start=date(2024, 1, 1), end=date(2024, 12, 31))

     successor = LeaseService.renew_agreement(
          db, ctx, agreement.id,
          new_end_date=date(2025, 12, 31),
          monthly_rent=Decimal("11000")
     )

     assert agreement.status == AgreementStatus.RENEWED
     assert successor.status == AgreementStatus.ACTIVE
     assert successor.start_date == date(2025, 1, 1)
     assert successor.monthly_rent == Decimal("11000")
     assert successor.rent_due_day == agreement.rent_due_day
     assert successor.tenant_id == agreement.tenant_id
     assert shop.status == ShopStatus.OCCUPIED
     assert entity_store.active_agreement_for_shop(db, shop.id).id == successor.id


def test_only_active_agreements_renew(db, ctx, make_agreement):
     agreement = make_agreement()
     LeaseService.update_status(db, ctx, agreement.id, AgreementStatus.TERMINATED)

     with pytest.raises(ValidationFailure):
          LeaseService.renew_agreement(db, ctx, agreement.id, new_end_date=date(2025, 12, 31))


def test_expire_agreements_past_end_date(db, ctx, make_shop, make_agreement):
     ending = make_agreement(start=date(2024, 1, 1), end=date(2024, 6, 30))
     running = make_agreement(start=date(2024, 1, 1), end=date(2024, 12, 31))

     expired = LeaseService.expire_agreements(db, ctx, today=date(2024, 7, 1))

     assert [a.id for a in expired] == [ending.id]
     assert ending.status == AgreementStatus.EXPIRED
     assert ending.shop.status == ShopStatus.VACANT
     assert running.status == AgreementStatus.ACTIVE


def test_extend_agreement(db, ctx, make_agreement):
     agreement = make_agreement(start=date(2024, 1, 1), end=date(2024, 6, 30))

     LeaseService.extend_agreement(db, ctx, agreement.id, date(2024, 12, 31))
     assert agreement.end_date == date(2024, 12, 31)

     with pytest.raises(ValidationFailure):
          LeaseService.extend_agreement(db, ctx, agreement.id, date(2023, 12, 31))


def test_delete_agreement_cascades_payments(db, ctx, make_shop, make_agreement):
     shop = make_shop()
     agreement = make_agreement(shop=shop)
     record_payment(db, ctx, agreement.id, Decimal("500"), payment_date=date(2024, 2, 1))

     LeaseService.delete_agreement(db, ctx, agreement.id)

     assert db.query(LeaseAgreement).count() == 0
     assert db.query(RentPayment).count() == 0
     assert shop.status == ShopStatus.VACANT


def test_delete_shop_cascades(db, ctx, make_shop, make_agreement):
     shop = make_shop()
     agreement = make_agreement(shop=shop)
     record_payment(db, ctx, agreement.id, Decimal("500"), payment_date=date(2024, 2, 1))
     entity_store.create_expense(
          db, ctx, shop_id=shop.id,
          category=ExpenseCategory.REPAIRS,
          amount=Decimal("80"),
          description="Door lock",
          expense_date=date(2024, 2, 2)
     )
     db.commit()

     entity_store.delete_shop(db, ctx, shop.id)
     db.commit()

     assert db.query(LeaseAgreement).count() == 0
     assert db.query(RentPayment).count() == 0
     assert db.query(Expense).count() == 0


def test_lifecycle_writes_activity(db, ctx, make_agreement):
     agreement = make_agreement(agreement_number="AG-LOG")
     LeaseService.update_status(db, ctx, agreement.id, AgreementStatus.TERMINATED)

     messages = [a.message for a in db.query(ActivityLog).order_by(ActivityLog.id).all()]
     assert any("AG-LOG created" in m for m in messages)
     assert any("AG-LOG changed from ACTIVE to TERMINATED" in m for m in messages)


def test_leased_shop_cannot_be_set_vacant_by_hand(db, ctx, make_shop, make_agreement):
     shop = make_shop()
     make_agreement(shop=shop)

     with pytest.raises(ConflictError) as excinfo:
          entity_store.update_shop_status(db, ctx, shop.id, ShopStatus.VACANT)

     assert excinfo.value.error_code == "SHOP_LEASED"
     db.refresh(shop)
     assert shop.status == ShopStatus.OCCUPIED
     assert entity_store.count_shops_by_status(db, ctx, ShopStatus.VACANT) == 0
     assert entity_store.count_shops_by_status(db, ctx, ShopStatus.OCCUPIED) == 1


def test_unleased_shop_cannot_be_set_occupied_by_hand(db, ctx, make_shop):
     shop = make_shop()

     with pytest.raises(ConflictError) as excinfo:
          entity_store.update_shop_status(db, ctx, shop.id, ShopStatus.OCCUPIED)

     assert excinfo.value.error_code == "SHOP_NOT_LEASED"
     db.refresh(shop)
     assert shop.status == ShopStatus.VACANT


def test_manual_status_after_lease_ends(db, ctx, make_shop, make_agreement):
     shop = make_shop()
     agreement = make_agreement(shop=shop)
     LeaseService.update_status(db, ctx, agreement.id, AgreementStatus.TERMINATED)

     entity_store.update_shop_status(db, ctx, shop.id, ShopStatus.UNDER_MAINTENANCE)

     db.expire_all()
     assert db.get(Shop, shop.id).status == ShopStatus.UNDER_MAINTENANCE
     assert any(
          "status updated to UNDER_MAINTENANCE" in a.message
          for a in db.query(ActivityLog).all()
     )
