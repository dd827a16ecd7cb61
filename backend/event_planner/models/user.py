# event_planner/models/user.py
from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from event_planner.core.base import Base
from event_planner.core.clock import utc_now


class Role(str, Enum):
    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"

    @property
    def authority(self) -> str:
        return f"ROLE_{self.value}"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    timezone = Column(String(64), nullable=False, server_default="UTC")

    # Comma-separated Role names, e.g. "USER,ADMIN"
    roles_csv = Column("roles", String(100), nullable=False, server_default=Role.USER.value)

    email_verified = Column(Boolean, nullable=False, server_default="false", default=False)
    email_verified_at = Column(DateTime(timezone=True), nullable=True)

    # Soft delete: the account is purged once scheduled_deletion_date passes.
    is_pending_deletion = Column(Boolean, nullable=False, server_default="false", default=False)
    scheduled_deletion_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    email_verification_tokens = relationship(
        "EmailVerificationToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    password_reset_tokens = relationship(
        "PasswordResetToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    events = relationship("Event", back_populates="creator", cascade="all, delete-orphan")
    recurring_events = relationship("RecurringEvent", back_populates="creator", cascade="all, delete-orphan")
    labels = relationship("Label", back_populates="creator", cascade="all, delete-orphan")
    badges = relationship("Badge", back_populates="creator", cascade="all, delete-orphan")

    @property
    def roles(self) -> set[Role]:
        raw = self.roles_csv or Role.USER.value
        return {Role(r.strip()) for r in raw.split(",") if r.strip()}

    @roles.setter
    def roles(self, value) -> None:
        self.roles_csv = ",".join(sorted(Role(r).value for r in value)) or Role.USER.value

    def mark_for_deletion(self, now: datetime, grace_period_days: int) -> None:
        self.is_pending_deletion = True
        self.scheduled_deletion_date = now + timedelta(days=grace_period_days)
