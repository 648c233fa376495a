"""
Custom exceptions for the LeaseHub backend.

Services raise these; main.py maps them to HTTP responses through
LeaseHubError.status_code.
"""
import functools
import logging

from sqlalchemy.exc import InterfaceError, OperationalError

logger = logging.getLogger(__name__)


class LeaseHubError(Exception):
     """Base exception for all leasing errors"""
     status_code = 400

     def __init__(self, message: str, error_code: str = None):
          self.message = message
          self.error_code = error_code or self.__class__.__name__
          super().__init__(self.message)


class NotFoundError(LeaseHubError):
     """Raised when a referenced shop, tenant, agreement or user does not exist"""
     status_code = 404


class ConflictError(LeaseHubError):
     """Raised when a shop already has an active agreement or a unique key is taken"""
     status_code = 409


class ValidationFailure(LeaseHubError):
     """Raised when input breaks a leasing rule (overpayment, bad due day, ...)"""
     status_code = 400


class StorageUnavailableError(LeaseHubError):
     """Raised when the underlying store cannot be reached"""
     status_code = 503


class AuthenticationError(LeaseHubError):
     """Raised when credentials or the session token are not valid"""
     status_code = 401


def guard_storage(func):
     """Re-raise driver level I/O failures from func as StorageUnavailableError."""

     @functools.wraps(func)
     def wrapper(*args, **kwargs):
          try:
               return func(*args, **kwargs)
          except (OperationalError, InterfaceError) as exc:
               logger.error("Storage failure in %s: %s", func.__name__, exc)
               raise StorageUnavailableError(f"Storage unavailable: {exc.orig}") from exc

     return wrapper
