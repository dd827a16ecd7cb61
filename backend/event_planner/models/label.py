from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from event_planner.core.base import Base


class Label(Base):
    __tablename__ = "labels"
    __table_args__ = (UniqueConstraint("creator_id", "name", name="uq_labels_creator_name"),)

    id = Column(Integer, primary_key=True, index=True)

    # ownership
    creator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(100), nullable=False)
    color = Column(String(20), nullable=False, default="GRAY", server_default="GRAY")

    badge_id = Column(Integer, ForeignKey("badges.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    creator = relationship("User", back_populates="labels")
    badge = relationship("Badge", back_populates="labels")
    events = relationship("Event", back_populates="label")
