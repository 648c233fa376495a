import enum
from sqlalchemy import (
     Column, Integer, String, Numeric, Date, Boolean, Text, DateTime, ForeignKey, Enum, Index, func, text,
)
from sqlalchemy.orm import relationship
from .base import Base


class AgreementStatus(str, enum.Enum):
     """Lifecycle state of a lease agreement."""
     ACTIVE = "ACTIVE"
     EXPIRED = "EXPIRED"
     TERMINATED = "TERMINATED"
     RENEWED = "RENEWED"


TERMINAL_STATUSES = frozenset({AgreementStatus.EXPIRED, AgreementStatus.TERMINATED, AgreementStatus.RENEWED})


class LeaseAgreement(Base):
     """
     LeaseAgreement model - the contract binding one shop to one tenant.

     A shop may have at most one ACTIVE agreement; the partial unique index
     below backs the check done in LeaseService.
     """
     __table_args__ = (
          Index(
               "uq_lease_agreements_active_shop",
               "shop_id",
               unique=True,
               sqlite_where=text("status = 'ACTIVE'"),
               postgresql_where=text("status = 'ACTIVE'"),
               mssql_where=text("status = 'ACTIVE'"),
          ),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     agreement_number = Column(String(64), nullable=False, unique=True, index=True)
     shop_id = Column(Integer, ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)

     # Lease period
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=False, index=True)

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     security_deposit = Column(Numeric(12, 2), nullable=False, default=0)
     rent_due_day = Column(Integer, nullable=False)  # Day of month rent is due (1-31)

     # Terms
     payment_terms = Column(Text, nullable=True)
     maintenance_charges = Column(Numeric(12, 2), nullable=False, default=0)
     utilities_included = Column(Boolean, default=False, nullable=False)
     notice_period_days = Column(Integer, default=30, nullable=False)
     agreement_document_path = Column(String(500), nullable=True)

     status = Column(
          Enum(AgreementStatus, name="agreement_status", create_constraint=True),
          default=AgreementStatus.ACTIVE,
          nullable=False,
          index=True
     )
     notes = Column(Text, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     shop = relationship("Shop", back_populates="agreements")
     tenant = relationship("Tenant", back_populates="agreements")
     payments = relationship(
          "RentPayment",
          back_populates="agreement",
          cascade="all",
          order_by="RentPayment.id"
     )

     def __repr__(self):
          return f"<LeaseAgreement(id={self.id}, number='{self.agreement_number}', status='{self.status.value}')>"

     @property
     def is_active(self) -> bool:
          return self.status == AgreementStatus.ACTIVE
