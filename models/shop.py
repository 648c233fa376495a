import enum
from sqlalchemy import Column, Integer, String, Numeric, Text, Boolean, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base


class ShopStatus(str, enum.Enum):
     """Occupancy state of a shop."""
     VACANT = "VACANT"
     OCCUPIED = "OCCUPIED"
     UNDER_MAINTENANCE = "UNDER_MAINTENANCE"
     RESERVED = "RESERVED"


class Shop(Base):
     """
     Shop model - a leasable unit.

     Status is driven by lease agreements (OCCUPIED while an ACTIVE agreement
     exists). Shops are soft-deleted through is_active so historical payments
     and reports stay intact.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

     shop_number = Column(String(50), nullable=False, default="")
     floor = Column(Integer, nullable=False, default=0)
     building_name = Column(String(255), nullable=False, default="")
     address = Column(String(500), nullable=False, default="")
     area = Column(Numeric(10, 2), nullable=False, default=0)  # square meters/feet

     # Defaults offered to new agreements
     monthly_rent = Column(Numeric(12, 2), nullable=False, default=0)
     security_deposit = Column(Numeric(12, 2), nullable=False, default=0)

     amenities = Column(Text, nullable=True)  # Comma-separated
     status = Column(
          Enum(ShopStatus, name="shop_status", create_constraint=True),
          default=ShopStatus.VACANT,
          nullable=False,
          index=True
     )
     is_active = Column(Boolean, default=True, nullable=False)
     notes = Column(Text, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     user = relationship("User", back_populates="shops")
     agreements = relationship("LeaseAgreement", back_populates="shop", cascade="all")
     expenses = relationship("Expense", back_populates="shop", cascade="all")

     def __repr__(self):
          return f"<Shop(id={self.id}, shop_number='{self.shop_number}', status='{self.status.value}')>"

     def mark_occupied(self) -> None:
          self.status = ShopStatus.OCCUPIED

     def mark_vacant(self) -> None:
          self.status = ShopStatus.VACANT
