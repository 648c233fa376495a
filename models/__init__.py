from .base import Base
from .user import User
from .shop import Shop, ShopStatus
from .tenant import Tenant
from .lease_agreement import LeaseAgreement, AgreementStatus, TERMINAL_STATUSES
from .rent_payment import RentPayment, PaymentMethod, PaymentStatus
from .expense import Expense, ExpenseCategory, RecurringFrequency
from .activity_log import ActivityLog

__all__ = [
     "Base",
     "User",
     "Shop",
     "ShopStatus",
     "Tenant",
     "LeaseAgreement",
     "AgreementStatus",
     "TERMINAL_STATUSES",
     "RentPayment",
     "PaymentMethod",
     "PaymentStatus",
     "Expense",
     "ExpenseCategory",
     "RecurringFrequency",
     "ActivityLog",
]
