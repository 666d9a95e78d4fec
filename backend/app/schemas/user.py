"""User and session schemas"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
import uuid


class UserCreate(BaseModel):
    """Registration and account update payload"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    """User login schema"""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    # Accepted for older clients; access tokens always live one hour.
    expires_in_seconds: Optional[int] = None


class UserResponse(BaseModel):
    """User response schema"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    created_at: datetime
    updated_at: datetime


class LoginResponse(UserResponse):
    """Profile plus a fresh token pair"""
    token: str
    refresh_token: str


class TokenResponse(BaseModel):
    """Access token issued from a refresh token"""
    token: str
