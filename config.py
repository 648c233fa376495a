"""
Application settings loaded from the environment (.env supported).

All values are plain module constants so they can be imported anywhere
without instantiating a settings object.
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
     return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Database
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")
SQLITE_PATH = os.getenv("SQLITE_PATH", "leasehub.db")


def build_database_url() -> str:
     """
     Resolve the database URL.

     DATABASE_URL wins; otherwise DB_SERVER selects MS SQL Server through
     pymssql; otherwise a local SQLite file is used.
     """
     explicit = os.getenv("DATABASE_URL", "").strip()
     if explicit:
          return explicit
     if DB_SERVER:
          safe_user = quote_plus(DB_USER or "")
          safe_pass = quote_plus(DB_PASS or "")
          return f"mssql+pymssql://{safe_user}:{safe_pass}@{DB_SERVER}:{DB_PORT}/{DB_NAME}"
     return f"sqlite:///{SQLITE_PATH}"


DATABASE_URL = build_database_url()
SQL_ECHO = _env_bool("SQL_ECHO")
SCHEMA_VERSION = int(os.getenv("SCHEMA_VERSION", "1"))

# HTTP
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "leasehub-dev-secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))

# Leasing rules
DEFAULT_RENT_DUE_DAY = int(os.getenv("DEFAULT_RENT_DUE_DAY", "5"))
ACTIVITY_RECENT_LIMIT = int(os.getenv("ACTIVITY_RECENT_LIMIT", "50"))
REMINDER_INCLUDE_PARTIAL = _env_bool("REMINDER_INCLUDE_PARTIAL")
REMINDER_UPCOMING_DAYS = int(os.getenv("REMINDER_UPCOMING_DAYS", "0"))

# Backups
BACKUP_DIR = os.getenv("BACKUP_DIR", "leasehub_backups")

# Brevo e-mail
BREVO_API_KEY = os.getenv("BREVO_API_KEY")
BREVO_SENDER_EMAIL = os.getenv("BREVO_SENDER_EMAIL", "noreply@leasehub.app")

# Azure Blob mirror for backups
AZURE_STORAGE_ACCOUNT = os.getenv("AZURE_STORAGE_ACCOUNT")
AZURE_STORAGE_KEY = os.getenv("AZURE_STORAGE_KEY")
AZURE_BACKUP_CONTAINER = os.getenv("AZURE_BACKUP_CONTAINER", "leasehub-backups")
