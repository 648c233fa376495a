# schemas/__init__.py
from .shop import ShopCreate, ShopUpdate, ShopStatusUpdate, ShopResponse
from .tenant import TenantCreate, TenantUpdate, TenantResponse
from .agreement import (
     AgreementCreate,
     AgreementStatusUpdate,
     AgreementRenew,
     AgreementEndDateUpdate,
     AgreementResponse,
)
from .payment import PaymentCreate, PaymentResponse, YearlyTotalResponse
from .rent import PeriodRecordResponse, RentSummaryResponse
from .expense import ExpenseCreate, ExpenseResponse
from .dashboard import DashboardStatsResponse, RentDueReminderResponse, ReminderNotifyResponse
from .activity import ActivityResponse
from .auth import SignupRequest, LoginRequest, UserResponse, TokenResponse
from .backup import BackupResponse, RestoreResponse

__all__ = [
     "ShopCreate",
     "ShopUpdate",
     "ShopStatusUpdate",
     "ShopResponse",
     "TenantCreate",
     "TenantUpdate",
     "TenantResponse",
     "AgreementCreate",
     "AgreementStatusUpdate",
     "AgreementRenew",
     "AgreementEndDateUpdate",
     "AgreementResponse",
     "PaymentCreate",
     "PaymentResponse",
     "YearlyTotalResponse",
     "PeriodRecordResponse",
     "RentSummaryResponse",
     "ExpenseCreate",
     "ExpenseResponse",
     "DashboardStatsResponse",
     "RentDueReminderResponse",
     "ReminderNotifyResponse",
     "ActivityResponse",
     "SignupRequest",
     "LoginRequest",
     "UserResponse",
     "TokenResponse",
     "BackupResponse",
     "RestoreResponse",
]
