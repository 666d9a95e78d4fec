"""Chirp service - validation, word moderation and ownership checks"""

from sqlalchemy.orm import Session
from typing import Iterable, List
import uuid

from app.config import settings
from app.models.chirp import Chirp
from app.core.exceptions import AuthorizationError, ResourceNotFoundError, ValidationError
import logging

logger = logging.getLogger(__name__)

CENSORED_WORD = "****"


def clean_body(body: str, banned_words: Iterable[str]) -> str:
    """
    Replace banned words with asterisks

    Words are split on single spaces and compared case-insensitively, so
    punctuation attached to a word ("Sharbert!") keeps it unmatched.
    """
    banned = {word.lower() for word in banned_words}
    words = body.split(" ")
    return " ".join(CENSORED_WORD if word.lower() in banned else word for word in words)


class ChirpService:
    """Service for chirps"""

    @staticmethod
    def validate_body(body: str, max_length: int = settings.CHIRP_MAX_LENGTH) -> None:
        if not body:
            raise ValidationError("Chirp body is required")
        # counts characters, not UTF-8 bytes
        if len(body) > max_length:
            raise ValidationError("Chirp is too long")

    @staticmethod
    def create_chirp(db: Session, user_id: uuid.UUID, body: str) -> Chirp:
        """
        Validate, moderate and store a chirp

        Args:
            db: Database session
            user_id: Authenticated author
            body: Raw chirp text

        Returns:
            Created chirp
        """
        ChirpService.validate_body(body)

        chirp = Chirp(body=clean_body(body, settings.BANNED_WORDS), user_id=user_id)
        db.add(chirp)
        db.commit()
        db.refresh(chirp)

        logger.info(f"Created chirp {chirp.id} for user {user_id}")
        return chirp

    @staticmethod
    def list_chirps(db: Session) -> List[Chirp]:
        """All chirps, oldest first"""
        return db.query(Chirp).order_by(Chirp.created_at.asc()).all()

    @staticmethod
    def get_chirp(db: Session, chirp_id: uuid.UUID) -> Chirp:
        chirp = db.get(Chirp, chirp_id)
        if not chirp:
            raise ResourceNotFoundError("Chirp")
        return chirp

    @staticmethod
    def delete_chirp(db: Session, chirp_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """
        Delete a chirp owned by the caller

        Raises:
            ResourceNotFoundError: Unknown chirp
            AuthorizationError: Caller is not the author
        """
        chirp = ChirpService.get_chirp(db, chirp_id)
        if chirp.user_id != user_id:
            raise AuthorizationError()

        db.delete(chirp)
        db.commit()
        logger.info(f"Deleted chirp {chirp_id}")


chirp_service = ChirpService()
