# app/repositories/sqlalchemy_store.py
"""SQLAlchemy-backed stores sharing one AsyncSession."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.attendant import Attendant
from app.models.meeting import Meeting
from app.models.meeting_attendance import MeetingAttendance
from app.models.summary import Summary


class SqlAlchemyTransaction:
    """
    Commit/rollback of the session's current transaction.

    Everything flushed through the session since the last commit is covered,
    so the unit of work should be given a fresh session per batch.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


class SqlAlchemyAttendantStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_email(self, email: str) -> Optional[Attendant]:
        stmt = select(Attendant).where(Attendant.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, attendant: Attendant) -> Attendant:
        self.session.add(attendant)
        await self.session.flush()
        return attendant


class SqlAlchemyMeetingStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, meeting: Meeting) -> Meeting:
        self.session.add(meeting)
        await self.session.flush()
        return meeting

    async def update(self, meeting: Meeting) -> None:
        self.session.add(meeting)
        await self.session.flush()


class SqlAlchemyAttendanceStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, link: MeetingAttendance) -> MeetingAttendance:
        self.session.add(link)
        await self.session.flush()
        return link


class SqlAlchemySummaryStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, summary: Summary) -> Summary:
        self.session.add(summary)
        await self.session.flush()
        return summary


class SqlAlchemyUnitOfWork:
    """
    UnitOfWork over a single AsyncSession. Writes are flushed immediately so
    generated ids are available, and only become durable on commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.attendants = SqlAlchemyAttendantStore(session)
        self.meetings = SqlAlchemyMeetingStore(session)
        self.attendances = SqlAlchemyAttendanceStore(session)
        self.summaries = SqlAlchemySummaryStore(session)

    async def begin(self) -> Optional[SqlAlchemyTransaction]:
        return SqlAlchemyTransaction(self.session)
