from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from event_planner.core.base import Base


class RecurringEvent(Base):
    __tablename__ = "recurring_events"

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

    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)

    # Stored as entered (e.g. "WEEKLY:MONDAY,WEDNESDAY"); expansion happens elsewhere.
    recurrence_rule = Column(String(255), nullable=False)

    label_id = Column(Integer, ForeignKey("labels.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    creator = relationship("User", back_populates="recurring_events")
    label = relationship("Label")
    events = relationship("Event", back_populates="recurring_event")
