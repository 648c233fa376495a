# services/__init__.py
from .exceptions import (
     LeaseHubError,
     NotFoundError,
     ConflictError,
     ValidationFailure,
     StorageUnavailableError,
     AuthenticationError,
)
from .entity_store import SessionContext
from .lease_service import LeaseService
from .rent_ledger import RentLedger, RentStatus, RentSummary, PeriodRecord, get_rent_summary
from .payment_service import record_payment
from .aggregation_service import DashboardStats, RentDueReminder, get_dashboard_stats, get_rent_due_reminders

__all__ = [
     "LeaseHubError",
     "NotFoundError",
     "ConflictError",
     "ValidationFailure",
     "StorageUnavailableError",
     "AuthenticationError",
     "SessionContext",
     "LeaseService",
     "RentLedger",
     "RentStatus",
     "RentSummary",
     "PeriodRecord",
     "get_rent_summary",
     "record_payment",
     "DashboardStats",
     "RentDueReminder",
     "get_dashboard_stats",
     "get_rent_due_reminders",
]
