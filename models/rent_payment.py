"""
RentPayment model - one payment row against an agreement for a (month, year) period.

Rows are immutable once written; corrections are made by adding further rows.
Several rows for the same period are summed by the rent ledger.
"""
import enum
from sqlalchemy import Column, Integer, String, Numeric, Date, Boolean, Text, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from .base import Base


class PaymentMethod(str, enum.Enum):
     CASH = "CASH"
     BANK_TRANSFER = "BANK_TRANSFER"
     CHEQUE = "CHEQUE"
     DIGITAL_WALLET = "DIGITAL_WALLET"


class PaymentStatus(str, enum.Enum):
     """Status stamped on the individual payment row when it was recorded."""
     PAID = "PAID"
     PENDING = "PENDING"
     PARTIAL = "PARTIAL"
     OVERDUE = "OVERDUE"


class RentPayment(Base):
     __table_args__ = (
          Index("ix_rent_payments_period", "month", "year"),
          Index("ix_rent_payments_agreement_period", "agreement_id", "year", "month"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     agreement_id = Column(
          Integer,
          ForeignKey("lease_agreements.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     amount = Column(Numeric(12, 2), nullable=False)
     payment_date = Column(Date, nullable=False, index=True)

     # Period the payment settles
     month = Column(Integer, nullable=False)  # 1-12
     year = Column(Integer, nullable=False)

     payment_method = Column(
          Enum(PaymentMethod, name="payment_method", create_constraint=True),
          default=PaymentMethod.CASH,
          nullable=False
     )
     reference_number = Column(String(255), nullable=True)
     notes = Column(Text, nullable=True)
     is_late = Column(Boolean, default=False, nullable=False)
     late_fee = Column(Numeric(12, 2), default=0, nullable=False)
     status = Column(
          Enum(PaymentStatus, name="payment_status", create_constraint=True),
          default=PaymentStatus.PAID,
          nullable=False
     )

     # Relationships
     agreement = relationship("LeaseAgreement", back_populates="payments")

     def __repr__(self):
          return f"<RentPayment(id={self.id}, agreement_id={self.agreement_id}, amount={self.amount}, period={self.month}/{self.year})>"
