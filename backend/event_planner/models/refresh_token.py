# event_planner/models/refresh_token.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from event_planner.core.base import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Store ONLY a keyed hash of the refresh token (never store raw refresh token)
    token_hash = Column(String(255), unique=True, index=True, nullable=False)

    issued_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Absolute expiration for this refresh token
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # Consumed by rotation or revoked by logout
    revoked = Column(Boolean, nullable=False, server_default="false", default=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="refresh_tokens")
