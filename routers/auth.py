# routers/auth.py
"""
Auth API routes: signup, login (session switch) and the current session.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_session
from schemas.auth import SignupRequest, LoginRequest, UserResponse, TokenResponse
from services import auth_service
from services.entity_store import SessionContext
from services.exceptions import NotFoundError
from utils.auth import create_access_token, get_current_context

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
     "/signup",
     response_model=UserResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create an operator account"
)
def signup(body: SignupRequest, db: Session = Depends(get_session)):
     """
     Register a new operator. The password is stored as a bcrypt hash and must
     be at least 8 characters with a digit, upper and lower case letters and a symbol.
     """
     return auth_service.signup(
          db,
          username=body.username,
          password=body.password,
          full_name=body.full_name,
          email=body.email,
          phone_number=body.phone_number
     )


@router.post("/login", response_model=TokenResponse, summary="Log in and switch the active session")
def login(body: LoginRequest, db: Session = Depends(get_session)):
     user = auth_service.switch_session(db, body.username, body.password)
     return TokenResponse(token=create_access_token(user), user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse, summary="Current session user")
def me(db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     user = auth_service.active_user(db)
     if not user or user.id != ctx.user_id:
          raise NotFoundError("No active session")
     return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="End the current session")
def logout(db: Session = Depends(get_session), ctx: SessionContext = Depends(get_current_context)):
     auth_service.end_session(db, ctx)
