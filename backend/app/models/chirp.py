"""Chirp model"""

import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.user import utcnow


class Chirp(Base):
    """Short post written by a user"""

    __tablename__ = "chirps"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    body = Column(String(280), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="chirps")

    __table_args__ = (
        Index("idx_chirps_user", "user_id"),
        Index("idx_chirps_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Chirp(id={self.id}, user_id={self.user_id})>"
