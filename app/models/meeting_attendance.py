# app/models/meeting_attendance.py
from datetime import timedelta

from sqlalchemy import Column, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from app.db.base import Base


class MeetingAttendance(Base):
    """
    Links an attendant to a meeting together with the time they spent in it.
    """

    __tablename__ = "meeting_attendances"

    id = Column(Integer, primary_key=True, index=True)

    meeting_id = Column(
        Integer,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attendant_id = Column(
        Integer,
        ForeignKey("attendants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    duration_seconds = Column(
        Float,
        nullable=False,
        default=0.0,
    )

    meeting = relationship("Meeting", back_populates="attendances")
    attendant = relationship("Attendant", back_populates="attendances")

    @property
    def duration(self) -> timedelta:
        return timedelta(seconds=self.duration_seconds or 0.0)

    def __repr__(self) -> str:
        return (
            f"<MeetingAttendance id={self.id} meeting_id={self.meeting_id} "
            f"attendant_id={self.attendant_id} duration={self.duration_seconds}s>"
        )
