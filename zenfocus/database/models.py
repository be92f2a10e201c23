"""SQLAlchemy ORM models for ZenFocus."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SessionRow(Base):
    """One focus session (guest sessions have a NULL user_id)."""

    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=True, index=True)
    mode = Column(String(20), nullable=False)              # study | deepwork | yoga | zen | interval
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    planned_duration = Column(Integer, nullable=False)     # seconds
    cycles = Column(Integer, nullable=False, default=1)
    actual_duration = Column(Integer, nullable=False, default=0)
    completed_fully = Column(Boolean, nullable=False, default=False)
    pause_count = Column(Integer, nullable=False, default=0)
    total_pause_time = Column(Integer, nullable=False, default=0)
    ambient_sound = Column(String(20), nullable=False, default="silence")
    notes = Column(String(500), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SessionRow id={self.id} mode={self.mode} "
            f"completed={self.completed_fully}>"
        )
