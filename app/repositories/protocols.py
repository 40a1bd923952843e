# app/repositories/protocols.py
"""Protocol interfaces for the storage collaborators used by batch uploads.

Structural typing only: any object with matching async methods can be
plugged into the batch orchestrator.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from app.models.attendant import Attendant
from app.models.meeting import Meeting
from app.models.meeting_attendance import MeetingAttendance
from app.models.summary import Summary


@runtime_checkable
class Transaction(Protocol):
    """A started storage transaction."""

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


@runtime_checkable
class AttendantStore(Protocol):
    """Attendants, looked up by exact (case-sensitive) email."""

    async def find_by_email(self, email: str) -> Optional[Attendant]: ...

    async def create(self, attendant: Attendant) -> Attendant: ...


@runtime_checkable
class MeetingStore(Protocol):
    async def create(self, meeting: Meeting) -> Meeting: ...

    async def update(self, meeting: Meeting) -> None: ...


@runtime_checkable
class AttendanceStore(Protocol):
    async def create(self, link: MeetingAttendance) -> MeetingAttendance: ...


@runtime_checkable
class SummaryStore(Protocol):
    async def create(self, summary: Summary) -> Summary: ...


@runtime_checkable
class UnitOfWork(Protocol):
    """
    Bundle of the four stores plus transaction control.

    `begin()` returns None when the backing store cannot run transactions;
    callers then proceed without one.
    """

    attendants: AttendantStore
    meetings: MeetingStore
    attendances: AttendanceStore
    summaries: SummaryStore

    async def begin(self) -> Optional[Transaction]: ...
