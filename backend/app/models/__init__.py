"""Database models"""

from app.models.user import User
from app.models.chirp import Chirp
from app.models.security import RefreshToken

__all__ = ["User", "Chirp", "RefreshToken"]
