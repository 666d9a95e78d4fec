"""Pydantic schemas for API validation"""

from app.schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    LoginResponse,
    TokenResponse,
)
from app.schemas.chirp import ChirpCreate, ChirpResponse
from app.schemas.response import ErrorResponse, HealthResponse

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "LoginResponse", "TokenResponse",
    "ChirpCreate", "ChirpResponse",
    "ErrorResponse", "HealthResponse",
]
