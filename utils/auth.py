# utils/auth.py
"""
JWT helpers and the FastAPI dependencies that turn a bearer token into a
SessionContext.
"""
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt
from sqlalchemy.orm import Session

import config
from database import get_session
from models import User
from services.entity_store import SessionContext


def create_access_token(user: User) -> str:
     expires = datetime.utcnow() + timedelta(minutes=config.JWT_EXPIRE_MINUTES)
     payload = {"id": user.id, "username": user.username, "exp": expires}
     return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
     """Raises JWTError when the token is malformed, expired or signed with another key."""
     return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          return decode_token(token)
     except JWTError:
          raise HTTPException(status_code=403, detail="Invalid token")


def context_from_payload(db: Session, payload: dict) -> SessionContext:
     """
     Resolve a token payload to the session context of the active user.

     Tokens of users that were switched out are refused.
     """
     user_id = payload.get("id")
     if not user_id:
          raise HTTPException(status_code=403, detail="Invalid token")
     user = db.query(User).filter(User.id == user_id).first()
     if not user or not user.is_active:
          raise HTTPException(status_code=401, detail="Session is no longer active")
     return SessionContext(user_id=user.id, username=user.username)


def get_current_context(
     token: dict = Depends(verify_token),
     db: Session = Depends(get_session)
) -> SessionContext:
     return context_from_payload(db, token)
