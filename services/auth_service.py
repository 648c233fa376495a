"""
Auth Service - operator accounts and the single active session.

Only one user is active at a time. Logging in is an explicit session switch:
every user is deactivated, the authenticated one is activated and stamped with
its login time, all in one commit.
"""
import logging
import re
from datetime import datetime
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import User
from services.entity_store import SessionContext
from services.exceptions import AuthenticationError, ConflictError, ValidationFailure, guard_storage

logger = logging.getLogger(__name__)

# Bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
     return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
     return pwd_context.verify(password, password_hash)


def is_password_strong(password: str) -> bool:
     """At least 8 characters with a digit, an upper and a lower case letter and a symbol."""
     return (
          len(password) >= MIN_PASSWORD_LENGTH
          and re.search(r"\d", password) is not None
          and re.search(r"[A-Z]", password) is not None
          and re.search(r"[a-z]", password) is not None
          and re.search(r"[^A-Za-z0-9]", password) is not None
     )


@guard_storage
def signup(
     db: Session,
     username: str,
     password: str,
     full_name: str = "",
     email: Optional[str] = None,
     phone_number: Optional[str] = None
) -> User:
     """
     Create an (inactive) operator account.

     Raises:
          ValidationFailure: If the username is blank or the password is weak
          ConflictError: If the username is taken
     """
     username = username.strip()
     if not username:
          raise ValidationFailure("Username is required", "INVALID_USERNAME")
     if not is_password_strong(password):
          raise ValidationFailure(
               "Password must be at least 8 characters and contain a digit, "
               "an upper case letter, a lower case letter and a symbol",
               "WEAK_PASSWORD"
          )
     if db.query(User.id).filter(User.username == username).first():
          raise ConflictError(f"Username '{username}' is already taken", "DUPLICATE_USERNAME")

     user = User(
          username=username,
          password_hash=hash_password(password),
          full_name=full_name,
          email=email,
          phone_number=phone_number,
          is_active=False
     )
     try:
          db.add(user)
          db.commit()
     except IntegrityError as exc:
          db.rollback()
          raise ConflictError(f"Username '{username}' is already taken", "DUPLICATE_USERNAME") from exc

     logger.info("Created user %s (id=%s)", username, user.id)
     return user


def authenticate(db: Session, username: str, password: str) -> User:
     user = db.query(User).filter(User.username == username.strip()).first()
     if not user or not verify_password(password, user.password_hash):
          logger.warning("Failed login for %s", username)
          raise AuthenticationError("Invalid username or password", "INVALID_CREDENTIALS")
     return user


@guard_storage
def switch_session(db: Session, username: str, password: str, now: Optional[datetime] = None) -> User:
     """
     Make the authenticated user the only active one.

     Raises:
          AuthenticationError: If the credentials do not match
     """
     user = authenticate(db, username, password)
     for other in db.query(User).filter(User.is_active.is_(True), User.id != user.id).all():
          other.is_active = False
     user.is_active = True
     user.last_login = now or datetime.now()
     db.commit()

     logger.info("Session switched to %s (id=%s)", user.username, user.id)
     return user


@guard_storage
def end_session(db: Session, ctx: SessionContext) -> None:
     user = db.query(User).filter(User.id == ctx.user_id).first()
     if user and user.is_active:
          user.is_active = False
          db.commit()


@guard_storage
def active_user(db: Session) -> Optional[User]:
     return db.query(User).filter(User.is_active.is_(True)).first()


def context_for(user: User) -> SessionContext:
     return SessionContext(user_id=user.id, username=user.username)
