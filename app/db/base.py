# app/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models in the Attendance Upload Service.
    """
    pass


# Import ORM models so that Base.metadata is aware of them
# This import should stay at the bottom to avoid circular dependencies.
from app.models.attendant import Attendant  # noqa: E402,F401
from app.models.meeting import Meeting  # noqa: E402,F401
from app.models.meeting_attendance import MeetingAttendance  # noqa: E402,F401
from app.models.summary import Summary  # noqa: E402,F401
