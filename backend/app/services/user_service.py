"""User service - handles account registration and updates"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import uuid

from app.models.user import User
from app.schemas.user import UserCreate
from app.core.security import PasswordHasher, password_hasher
from app.core.exceptions import ResourceAlreadyExistsError, ResourceNotFoundError
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Service for user management"""

    @staticmethod
    def _commit_unique(db: Session, user: User) -> User:
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Duplicate email rejected: {user.email}")
            raise ResourceAlreadyExistsError("User")
        db.refresh(user)
        return user

    @staticmethod
    def create_user(db: Session, user_data: UserCreate, hasher: PasswordHasher = password_hasher) -> User:
        """
        Create new user

        Args:
            db: Database session
            user_data: Email and plain text password
            hasher: Password hasher

        Returns:
            Created user

        Raises:
            ResourceAlreadyExistsError: If the email is taken
        """
        email = str(user_data.email)
        if db.query(User).filter(User.email == email).first():
            raise ResourceAlreadyExistsError("User")

        user = User(email=email, hashed_password=hasher.hash(user_data.password))
        db.add(user)
        user = UserService._commit_unique(db, user)

        logger.info(f"Created user: {user.id}")
        return user

    @staticmethod
    def update_user(
        db: Session,
        user_id: uuid.UUID,
        user_data: UserCreate,
        hasher: PasswordHasher = password_hasher,
    ) -> User:
        """
        Replace a user's email and password

        Raises:
            ResourceNotFoundError: If the account no longer exists
            ResourceAlreadyExistsError: If another account owns the email
        """
        user = db.get(User, user_id)
        if not user:
            raise ResourceNotFoundError("User")

        email = str(user_data.email)
        clash = db.query(User).filter(User.email == email, User.id != user_id).first()
        if clash:
            raise ResourceAlreadyExistsError("User")

        user.email = email
        user.hashed_password = hasher.hash(user_data.password)
        user = UserService._commit_unique(db, user)

        logger.info(f"Updated user: {user.id}")
        return user

    @staticmethod
    def delete_all_users(db: Session) -> int:
        """
        Delete every user; refresh tokens and chirps go with them (ON DELETE CASCADE)

        Returns:
            Number of users deleted
        """
        count = db.query(User).delete()
        db.commit()

        logger.info(f"Deleted {count} users")
        return count


# Singleton instance
user_service = UserService()
