# app/models/summary.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, LargeBinary, Text
from sqlalchemy.orm import relationship

from app.db.base import Base


class Summary(Base):
    """
    Result of one committed upload batch: the rendered attendance table and
    its XLSX export. Owns the meetings created by that batch.
    """

    __tablename__ = "summaries"

    id = Column(Integer, primary_key=True, index=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz=timezone.utc),
        index=True,
    )

    html_table = Column(Text, nullable=False)
    xlsx_data = Column(LargeBinary, nullable=False)

    meetings = relationship(
        "Meeting",
        back_populates="summary",
        order_by="Meeting.id",
    )

    def __repr__(self) -> str:
        return f"<Summary id={self.id} created_at={self.created_at}>"
