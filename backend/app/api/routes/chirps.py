"""Chirp routes"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
import uuid

from app.core.database import get_db
from app.schemas.chirp import ChirpCreate, ChirpResponse
from app.services.chirp_service import chirp_service
from app.api.deps import get_current_user_id

router = APIRouter()


@router.post("", response_model=ChirpResponse, status_code=status.HTTP_201_CREATED)
def create_chirp(
    chirp: ChirpCreate,
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Post a chirp as the authenticated user

    Banned words are replaced with asterisks before saving.
    """
    return chirp_service.create_chirp(db, current_user_id, chirp.body)


@router.get("", response_model=List[ChirpResponse])
def get_chirps(db: Session = Depends(get_db)):
    """All chirps, oldest first"""
    return chirp_service.list_chirps(db)


@router.get("/{chirp_id}", response_model=ChirpResponse)
def get_chirp(chirp_id: uuid.UUID, db: Session = Depends(get_db)):
    return chirp_service.get_chirp(db, chirp_id)


@router.delete("/{chirp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chirp(
    chirp_id: uuid.UUID,
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Delete a chirp; only its author may do so

    Returns:
        204 on success, 403 for other users, 404 for unknown chirps
    """
    chirp_service.delete_chirp(db, chirp_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
