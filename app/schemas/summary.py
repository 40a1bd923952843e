# app/schemas/summary.py
from datetime import datetime

from pydantic import BaseModel, Field


class MeetingBrief(BaseModel):
    """
    A meeting belonging to a summary, with its attendee count.
    """

    id: int = Field(..., examples=[1])
    title: str = Field(..., examples=["Meeting with Jan Nowak"])
    date: datetime = Field(..., description="Meeting start time as parsed from the export.")
    attendee_count: int = Field(..., description="Number of attendance links for the meeting.", examples=[1])


class SummaryListItem(BaseModel):
    """
    Public representation of a Summary in paged listings.
    """

    id: int = Field(..., examples=[1], description="Database identifier of the summary.")
    created_at: datetime = Field(..., description="UTC timestamp of the upload batch.")
    meeting_count: int = Field(..., description="Number of meetings in the batch.", examples=[2])
    html_table: str = Field(..., description="Rendered attendance table.")


class SummaryDetail(SummaryListItem):
    """
    A Summary together with its meetings.
    """

    meetings: list[MeetingBrief] = Field(default_factory=list)


class SummaryPage(BaseModel):
    """
    One page of summaries plus pagination metadata.
    """

    summaries: list[SummaryListItem]
    page: int = Field(..., examples=[1])
    page_size: int = Field(..., examples=[5])
    total_count: int = Field(..., examples=[12])
    total_pages: int = Field(..., examples=[3])


class UploadResponse(BaseModel):
    """
    Response returned after a successful upload batch.
    """

    summary_id: int = Field(..., examples=[1])
    html_table: str


class UploadErrorResponse(BaseModel):
    """
    Error payload returned when an upload batch is rejected.
    """

    error: str = Field(..., description="Human-readable error message.")
    error_code: str = Field(..., examples=["TYPE_MISMATCH"])
    hint: str = Field(..., description="Suggestion on how to fix the upload.")
    detected_type: str | None = Field(None, examples=["application/json"])
    original_extension: str | None = Field(None, examples=[".csv"])
    file_name: str | None = Field(None, examples=["response.csv"])
