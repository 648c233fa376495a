# schemas/auth.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class SignupRequest(BaseModel):
     username: str = Field(..., min_length=1, max_length=100)
     password: str = Field(..., min_length=1)
     full_name: str = Field(default="", max_length=200)
     email: Optional[str] = Field(None, max_length=255)
     phone_number: Optional[str] = Field(None, max_length=50)


class LoginRequest(BaseModel):
     username: str
     password: str


class UserResponse(BaseModel):
     id: int
     username: str
     full_name: str
     email: Optional[str] = None
     phone_number: Optional[str] = None
     is_active: bool
     last_login: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
     token: str
     user: UserResponse
