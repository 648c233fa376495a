# routers/__init__.py
from . import activity, agreements, auth, backups, dashboard, expenses, reports, shops, tenants

__all__ = [
     "activity",
     "agreements",
     "auth",
     "backups",
     "dashboard",
     "expenses",
     "reports",
     "shops",
     "tenants",
]
