"""Generic API response schemas"""

from pydantic import BaseModel
from typing import Optional, Any, List


class ErrorResponse(BaseModel):
    """Generic API error response"""
    error: str
    details: Optional[List[Any]] = None


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: str
