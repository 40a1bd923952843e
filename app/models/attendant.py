# app/models/attendant.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Attendant(Base):
    """
    A meeting participant, deduplicated across uploads by exact email match.
    """

    __tablename__ = "attendants"

    id = Column(Integer, primary_key=True, index=True)

    email = Column(String(320), nullable=False, unique=True, index=True)

    # Name captured when the attendant was first seen; later uploads keep it.
    name = Column(String(255), nullable=True)

    attendances = relationship("MeetingAttendance", back_populates="attendant")

    def __repr__(self) -> str:
        return f"<Attendant id={self.id} email={self.email}>"
