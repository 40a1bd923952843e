# app/models/meeting.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Meeting(Base):
    """
    A single meeting parsed from one uploaded attendance export.
    """

    __tablename__ = "meetings"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(512), nullable=False)
    date = Column(DateTime, nullable=False, index=True)

    summary_id = Column(
        Integer,
        ForeignKey("summaries.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    summary = relationship("Summary", back_populates="meetings")
    attendances = relationship(
        "MeetingAttendance",
        back_populates="meeting",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Meeting id={self.id} title={self.title!r} date={self.date}>"
