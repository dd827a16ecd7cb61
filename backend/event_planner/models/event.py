from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from event_planner.core.base import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)

    # ownership
    creator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)

    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)

    label_id = Column(Integer, ForeignKey("labels.id", ondelete="SET NULL"), nullable=True, index=True)
    recurring_event_id = Column(
        Integer,
        ForeignKey("recurring_events.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    is_completed = Column(Boolean, nullable=False, default=False, server_default="false")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    creator = relationship("User", back_populates="events")
    label = relationship("Label", back_populates="events")
    recurring_event = relationship("RecurringEvent", back_populates="events")
