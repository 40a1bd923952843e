# app/repositories/memory_store.py
"""In-memory stores: list-backed fakes with optional snapshot transactions."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from app.models.attendant import Attendant
from app.models.meeting import Meeting
from app.models.meeting_attendance import MeetingAttendance
from app.models.summary import Summary


class _Tables:
    """Row lists and id counters shared by all stores of one unit of work."""

    def __init__(self) -> None:
        self.attendants: List[Attendant] = []
        self.meetings: List[Meeting] = []
        self.attendances: List[MeetingAttendance] = []
        self.summaries: List[Summary] = []
        self.next_ids: Dict[str, int] = {
            "attendants": 1,
            "meetings": 1,
            "attendances": 1,
            "summaries": 1,
        }

    def assign_id(self, table: str, entity: Any) -> None:
        entity.id = self.next_ids[table]
        self.next_ids[table] += 1

    def snapshot(self) -> Dict[str, Any]:
        return {
            "attendants": list(self.attendants),
            "meetings": list(self.meetings),
            "attendances": list(self.attendances),
            "summaries": list(self.summaries),
            "next_ids": copy.copy(self.next_ids),
        }

    def restore(self, state: Dict[str, Any]) -> None:
        self.attendants = state["attendants"]
        self.meetings = state["meetings"]
        self.attendances = state["attendances"]
        self.summaries = state["summaries"]
        self.next_ids = state["next_ids"]


class MemoryTransaction:
    """Restores the tables to the state captured at begin() on rollback."""

    def __init__(self, tables: _Tables) -> None:
        self._tables = tables
        self._state = tables.snapshot()

    async def commit(self) -> None:
        self._state = self._tables.snapshot()

    async def rollback(self) -> None:
        self._tables.restore(self._state)


class MemoryAttendantStore:
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def find_by_email(self, email: str) -> Optional[Attendant]:
        return next((a for a in self._tables.attendants if a.email == email), None)

    async def create(self, attendant: Attendant) -> Attendant:
        self._tables.assign_id("attendants", attendant)
        self._tables.attendants.append(attendant)
        return attendant


class MemoryMeetingStore:
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def create(self, meeting: Meeting) -> Meeting:
        self._tables.assign_id("meetings", meeting)
        self._tables.meetings.append(meeting)
        return meeting

    async def update(self, meeting: Meeting) -> None:
        if meeting not in self._tables.meetings:
            raise LookupError(f"Meeting with id={meeting.id} not found")


class MemoryAttendanceStore:
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def create(self, link: MeetingAttendance) -> MeetingAttendance:
        self._tables.assign_id("attendances", link)
        self._tables.attendances.append(link)
        return link


class MemorySummaryStore:
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    async def create(self, summary: Summary) -> Summary:
        self._tables.assign_id("summaries", summary)
        self._tables.summaries.append(summary)
        return summary


class MemoryUnitOfWork:
    """
    Dict/list-backed UnitOfWork for unit tests.

    With `supports_transactions=False` (the default) `begin()` returns None,
    mirroring a store without transaction support.
    """

    def __init__(self, supports_transactions: bool = False) -> None:
        self.tables = _Tables()
        self.supports_transactions = supports_transactions
        self.attendants = MemoryAttendantStore(self.tables)
        self.meetings = MemoryMeetingStore(self.tables)
        self.attendances = MemoryAttendanceStore(self.tables)
        self.summaries = MemorySummaryStore(self.tables)

    async def begin(self) -> Optional[MemoryTransaction]:
        if not self.supports_transactions:
            return None
        return MemoryTransaction(self.tables)
