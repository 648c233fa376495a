import enum
from sqlalchemy import Column, Integer, String, Numeric, Date, Boolean, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base


class ExpenseCategory(str, enum.Enum):
     MAINTENANCE = "MAINTENANCE"
     UTILITIES = "UTILITIES"
     REPAIRS = "REPAIRS"
     TAXES = "TAXES"
     INSURANCE = "INSURANCE"
     CLEANING = "CLEANING"
     SECURITY = "SECURITY"
     OTHER = "OTHER"


class RecurringFrequency(str, enum.Enum):
     DAILY = "DAILY"
     WEEKLY = "WEEKLY"
     MONTHLY = "MONTHLY"
     QUARTERLY = "QUARTERLY"
     YEARLY = "YEARLY"


class Expense(Base):
     """
     Expense model - an operating cost, optionally tied to a shop.
     Only aggregated for profit/loss; never part of the rent ledger.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     shop_id = Column(Integer, ForeignKey("shops.id", ondelete="CASCADE"), nullable=True, index=True)  # null = general

     category = Column(
          Enum(ExpenseCategory, name="expense_category", create_constraint=True),
          nullable=False,
          index=True
     )
     amount = Column(Numeric(12, 2), nullable=False)
     description = Column(String(500), nullable=False)
     expense_date = Column(Date, nullable=False, index=True)
     receipt_path = Column(String(500), nullable=True)
     is_recurring = Column(Boolean, default=False, nullable=False)
     recurring_frequency = Column(
          Enum(RecurringFrequency, name="recurring_frequency", create_constraint=True),
          nullable=True
     )
     notes = Column(Text, nullable=True)

     # Relationships
     shop = relationship("Shop", back_populates="expenses")

     def __repr__(self):
          return f"<Expense(id={self.id}, category='{self.category.value}', amount={self.amount})>"
