# app/services/summary_queries.py
from __future__ import annotations

import math
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.meeting import Meeting
from app.models.summary import Summary
from app.schemas.summary import MeetingBrief, SummaryDetail, SummaryListItem, SummaryPage

DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100


def normalize_paging(page: int, page_size: int) -> Tuple[int, int]:
    """
    Clamp paging input: page below 1 becomes 1, a page size outside
    1..MAX_PAGE_SIZE falls back to DEFAULT_PAGE_SIZE.
    """
    if page < 1:
        page = 1
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def _with_meetings(stmt):
    return stmt.options(selectinload(Summary.meetings).selectinload(Meeting.attendances))


async def get_summary(db: AsyncSession, summary_id: int) -> Optional[Summary]:
    stmt = _with_meetings(select(Summary).where(Summary.id == summary_id))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_summaries(
    db: AsyncSession,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    search: str | None = None,
    number: int | None = None,
    sort_desc: bool = True,
) -> SummaryPage:
    """
    Return one page of summaries.

    Filters
    -------
    - `search`: case-insensitive substring of any meeting title in the summary.
    - `number`: exact summary id.

    Ordering is by creation time (newest first unless `sort_desc` is false),
    with the id as a tie-breaker.
    """
    page, page_size = normalize_paging(page, page_size)

    stmt = select(Summary)
    if search:
        stmt = stmt.where(Summary.meetings.any(Meeting.title.ilike(f"%{search.strip()}%")))
    if number is not None:
        stmt = stmt.where(Summary.id == number)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    if sort_desc:
        stmt = stmt.order_by(Summary.created_at.desc(), Summary.id.desc())
    else:
        stmt = stmt.order_by(Summary.created_at.asc(), Summary.id.asc())

    stmt = _with_meetings(stmt).offset((page - 1) * page_size).limit(page_size)
    result = await db.execute(stmt)
    summaries: List[Summary] = list(result.scalars().all())

    return SummaryPage(
        summaries=[to_list_item(s) for s in summaries],
        page=page,
        page_size=page_size,
        total_count=total,
        total_pages=math.ceil(total / page_size),
    )


async def get_summary_xlsx(db: AsyncSession, summary_id: int) -> Optional[Tuple[bytes, str]]:
    summary = await db.get(Summary, summary_id)
    if summary is None:
        return None
    return summary.xlsx_data, f"meeting-summary-{summary_id}.xlsx"


def to_list_item(summary: Summary) -> SummaryListItem:
    return SummaryListItem(
        id=summary.id,
        created_at=summary.created_at,
        meeting_count=len(summary.meetings),
        html_table=summary.html_table,
    )


def to_detail(summary: Summary) -> SummaryDetail:
    return SummaryDetail(
        id=summary.id,
        created_at=summary.created_at,
        meeting_count=len(summary.meetings),
        html_table=summary.html_table,
        meetings=[
            MeetingBrief(
                id=meeting.id,
                title=meeting.title,
                date=meeting.date,
                attendee_count=len(meeting.attendances),
            )
            for meeting in summary.meetings
        ],
    )
