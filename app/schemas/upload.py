# app/schemas/upload.py
from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Dialect(str, Enum):
    """
    The two attendance-export layouts understood by the parser.
    """

    SECTIONED = "SECTIONED"
    SIMPLE = "SIMPLE"


class RawUpload(BaseModel):
    """
    A single uploaded file exactly as received: bytes plus the declared
    filename and content-type label.
    """

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(..., description="Raw file payload.")
    filename: str = Field(
        ...,
        description="Filename declared by the client.",
        examples=["Meeting with Jan Nowak - Attendance report 11-26-25.csv"],
    )
    content_type: str = Field(
        "text/csv",
        description="Content-type label declared by the client.",
        examples=["text/csv"],
    )


class ValidationOutcome(BaseModel):
    """
    Result of sniffing an uploaded file's content.

    When `is_valid` is true only `detected_encoding` and `detected_type`
    are meaningful; otherwise `error_code` names the defect.
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    detected_encoding: str | None = Field(
        None,
        description="Python codec name used to decode the file.",
        examples=["utf-8", "utf-16-le"],
    )
    detected_type: str | None = Field(
        None,
        description="Content type the bytes actually look like.",
        examples=["text/csv", "application/json"],
    )
    error_code: str | None = Field(None, examples=["TYPE_MISMATCH"])
    original_extension: str | None = Field(
        None,
        description="Lower-cased extension of the declared filename, including the dot.",
        examples=[".csv"],
    )
    message: str | None = None

    @classmethod
    def valid(cls, encoding: str) -> "ValidationOutcome":
        return cls(is_valid=True, detected_encoding=encoding, detected_type="text/csv")

    @classmethod
    def invalid(
        cls,
        error_code: str,
        message: str,
        detected_type: str | None = None,
        original_extension: str | None = None,
    ) -> "ValidationOutcome":
        return cls(
            is_valid=False,
            error_code=error_code,
            message=message,
            detected_type=detected_type,
            original_extension=original_extension,
        )


class AttendeeRecord(BaseModel):
    """
    One participant row parsed out of an attendance export.
    """

    name: str = Field("", description="Display name as written in the export.")
    email: str = Field(..., description="Syntactically validated email address.")
    duration: timedelta = Field(
        timedelta(0),
        description="Time the participant spent in the meeting.",
    )

    @field_validator("duration")
    @classmethod
    def _non_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("duration must not be negative")
        return value


class MeetingRecord(BaseModel):
    """
    A fully validated meeting parsed from one file, ready for persistence.

    Never holds zero attendees: construction fails instead.
    """

    title: str = Field(..., min_length=1, examples=["Meeting with Jan Nowak"])
    occurred_at: datetime = Field(..., description="Meeting start time.")
    attendees: list[AttendeeRecord] = Field(..., min_length=1)
    dialect: Dialect = Field(Dialect.SIMPLE, description="Export layout the record came from.")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


class BatchResult(BaseModel):
    """
    Outcome of a successfully committed upload batch.
    """

    summary_id: int = Field(..., description="Identifier of the created summary.", examples=[1])
    html_table: str = Field(..., description="Rendered attendance summary table.")
    meeting_ids: list[int] = Field(
        default_factory=list,
        description="Identifiers of the created meetings, in upload order.",
    )
