"""Chirp schemas"""

from pydantic import BaseModel, ConfigDict
from datetime import datetime
import uuid


class ChirpCreate(BaseModel):
    """Length and emptiness are checked by the chirp service so the messages stay specific"""
    body: str = ""


class ChirpResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    body: str
    user_id: uuid.UUID
