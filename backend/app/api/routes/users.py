"""User management routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import uuid

from app.core.database import get_db
from app.schemas.user import UserCreate, UserResponse
from app.services.user_service import user_service
from app.api.deps import get_current_user_id

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """
    Register a new user

    Args:
        user_data: Email and password
        db: Database session

    Returns:
        Created user
    """
    return user_service.create_user(db, user_data)


@router.put("", response_model=UserResponse)
def update_user(
    user_data: UserCreate,
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Change the authenticated user's email and password

    Args:
        user_data: New email and password
        current_user_id: Authenticated caller

    Returns:
        Updated user
    """
    return user_service.update_user(db, current_user_id, user_data)
