# app/services/dialect_parser.py
from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import Callable, Dict, List

from app.core.exceptions import ParseFailure
from app.schemas.upload import AttendeeRecord, Dialect, MeetingRecord
from app.services.attendance_fields import is_valid_email, parse_datetime, parse_duration

logger = logging.getLogger(__name__)

# Error codes
EMPTY_CONTENT = "EMPTY_CONTENT"
MISSING_SUMMARY_SECTION = "MISSING_SUMMARY_SECTION"
MISSING_PARTICIPANTS_SECTION = "MISSING_PARTICIPANTS_SECTION"
MISSING_MEETING_TITLE = "MISSING_MEETING_TITLE"
MISSING_START_TIME = "MISSING_START_TIME"
MISSING_TITLE = "MISSING_TITLE"
INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
INVALID_HEADER = "INVALID_HEADER"
INVALID_EMAIL_FORMAT = "INVALID_EMAIL_FORMAT"
NO_ATTENDEES = "NO_ATTENDEES"
INSUFFICIENT_DATA = "INSUFFICIENT_DATA"

# Sectioned layout markers
SUMMARY_SECTION = "1. Summary"
PARTICIPANTS_SECTION = "2. Participants"
NEXT_SECTION_PREFIX = "3."
MEETING_TITLE_FIELD = "Meeting title\t"
START_TIME_FIELD = "Start time\t"
PARTICIPANT_ID_COLUMN = "Participant ID (UPN)"
SECTIONED_REQUIRED_COLUMNS = ("Name", "Email", "In-Meeting Duration")

SECTIONED_MIN_FIELDS = 5
SECTIONED_NAME_FIELD = 0
SECTIONED_DURATION_FIELD = 3
SECTIONED_EMAIL_FIELD = 4

SIMPLE_MIN_LINES = 3


def detect_dialect(text: str) -> Dialect:
    """
    Decide which attendance-export layout the text uses.

    The sectioned layout is recognised by its numbered section markers, or
    by the combination of a `Meeting title` field and a
    `Participant ID (UPN)` column. Everything else is treated as simple.
    """
    if SUMMARY_SECTION in text or PARTICIPANTS_SECTION in text:
        return Dialect.SECTIONED
    if MEETING_TITLE_FIELD in text and PARTICIPANT_ID_COLUMN in text:
        return Dialect.SECTIONED
    return Dialect.SIMPLE


def parse(text: str) -> MeetingRecord:
    """
    Parse and validate decoded attendance-export text.

    Raises
    ------
    ParseFailure
        With one of the error codes defined in this module when the text is
        structurally or semantically invalid for its detected dialect.
    """
    if not text or not text.strip():
        raise ParseFailure(EMPTY_CONTENT, "CSV file is empty or contains only whitespace")

    return _PARSERS[detect_dialect(text)](text)


# ---------------------------------------------------------------------------
# Sectioned dialect
# ---------------------------------------------------------------------------

def parse_sectioned(text: str) -> MeetingRecord:
    """
    Parse the tab-delimited, multi-section attendance report.

    Layout
    ------
        1. Summary
        Meeting title<TAB>...
        Start time<TAB>11/26/25, 4:16:54 PM
        ...
        2. Participants
        Name<TAB>First Join<TAB>Last Leave<TAB>In-Meeting Duration<TAB>Email<TAB>...
        <rows until a blank line or the "3." section>

    A single syntactically invalid email fails the whole file.
    """
    if SUMMARY_SECTION not in text:
        raise ParseFailure(
            MISSING_SUMMARY_SECTION,
            f"Attendance report must contain '{SUMMARY_SECTION}' section",
        )
    if PARTICIPANTS_SECTION not in text:
        raise ParseFailure(
            MISSING_PARTICIPANTS_SECTION,
            f"Attendance report must contain '{PARTICIPANTS_SECTION}' section",
        )

    raw_lines = text.splitlines()
    lines = [line for line in raw_lines if line]

    title = _sectioned_title(lines)
    occurred_at = _sectioned_start_time(lines)
    attendees = _sectioned_attendees(raw_lines)

    return MeetingRecord(
        title=title,
        occurred_at=occurred_at,
        attendees=attendees,
        dialect=Dialect.SECTIONED,
    )


def _field_value(lines: List[str], prefix: str) -> str | None:
    line = next((candidate for candidate in lines if candidate.startswith(prefix)), None)
    if line is None:
        return None

    parts = line.split("\t")
    if len(parts) < 2:
        return None
    return parts[1].strip()


def _sectioned_title(lines: List[str]) -> str:
    title = _field_value(lines, MEETING_TITLE_FIELD)
    if not title:
        raise ParseFailure(
            MISSING_MEETING_TITLE,
            "Attendance report must contain a valid 'Meeting title' field",
        )
    return title


def _sectioned_start_time(lines: List[str]) -> datetime:
    value = _field_value(lines, START_TIME_FIELD)
    if value is None:
        raise ParseFailure(MISSING_START_TIME, "Attendance report must contain 'Start time' field")

    parsed = parse_datetime(value)
    if parsed is None:
        raise ParseFailure(
            INVALID_DATE_FORMAT,
            f"Invalid date format in 'Start time' field: {value}",
        )
    return parsed


def _sectioned_attendees(raw_lines: List[str]) -> List[AttendeeRecord]:
    marker_idx = next(
        (i for i, line in enumerate(raw_lines) if line.startswith(PARTICIPANTS_SECTION)),
        None,
    )
    if marker_idx is None:
        raise ParseFailure(
            MISSING_PARTICIPANTS_SECTION,
            f"Attendance report must contain '{PARTICIPANTS_SECTION}' section",
        )

    header_idx = next(
        (i for i in range(marker_idx + 1, len(raw_lines)) if raw_lines[i].strip()),
        None,
    )
    if header_idx is None:
        raise ParseFailure(NO_ATTENDEES, "Attendance report must contain participant data")

    header = raw_lines[header_idx]
    for column in SECTIONED_REQUIRED_COLUMNS:
        if column not in header:
            raise ParseFailure(
                INVALID_HEADER,
                f"Participants section header must contain '{column}' field",
            )

    attendees: List[AttendeeRecord] = []
    for line in raw_lines[header_idx + 1 :]:
        stripped = line.strip()
        if not stripped or stripped.startswith(NEXT_SECTION_PREFIX):
            break

        parts = line.split("\t")
        if len(parts) < SECTIONED_MIN_FIELDS:
            logger.debug("Skipping short participant row: %r", line)
            continue

        email = parts[SECTIONED_EMAIL_FIELD].strip()
        if not email:
            continue
        if not is_valid_email(email):
            raise ParseFailure(INVALID_EMAIL_FORMAT, f"Invalid email format: {email}")

        attendees.append(
            AttendeeRecord(
                name=parts[SECTIONED_NAME_FIELD].strip(),
                email=email,
                duration=parse_duration(parts[SECTIONED_DURATION_FIELD]),
            )
        )

    if not attendees:
        raise ParseFailure(
            NO_ATTENDEES,
            "Attendance report must contain at least one valid attendee with email address",
        )
    return attendees


# ---------------------------------------------------------------------------
# Simple dialect
# ---------------------------------------------------------------------------

def parse_simple(text: str) -> MeetingRecord:
    """
    Parse the minimal comma-delimited layout:

        Title[,Date]
        Name,Email[,Duration]
        John Doe,john@example.com,45
        ...

    Malformed rows are skipped; a present but invalid email fails the file.
    Without a date on the first line the meeting is dated "now".
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < SIMPLE_MIN_LINES:
        raise ParseFailure(
            INSUFFICIENT_DATA,
            "CSV file does not contain enough data (minimum 3 lines required: "
            "title, header, and at least one attendee)",
        )

    title, occurred_at = _simple_title_and_date(lines[0])

    header = lines[1].strip().lower()
    if "name" not in header or "email" not in header:
        raise ParseFailure(INVALID_HEADER, "CSV header must contain 'Name' and 'Email' fields")

    attendees = _simple_attendees(lines[2:])

    return MeetingRecord(
        title=title,
        occurred_at=occurred_at,
        attendees=attendees,
        dialect=Dialect.SIMPLE,
    )


def _simple_title_and_date(line: str) -> tuple[str, datetime]:
    parts = line.strip().split(",")
    title = parts[0].strip().strip('"')
    occurred_at = datetime.now()

    if len(parts) >= 2:
        date_text = parts[1].strip().strip('"')
        parsed = parse_datetime(date_text)
        if parsed is None:
            raise ParseFailure(INVALID_DATE_FORMAT, f"Invalid date format: {date_text}")
        occurred_at = parsed

    if not title:
        raise ParseFailure(MISSING_TITLE, "CSV must contain a valid meeting title")

    return title, occurred_at


def _simple_attendees(lines: List[str]) -> List[AttendeeRecord]:
    reader = csv.reader(io.StringIO("\n".join(lines)))
    attendees: List[AttendeeRecord] = []

    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            logger.debug("Skipping malformed attendee row: %s", exc)
            continue

        if len(row) < 2:
            continue

        email = row[1].strip()
        if not email:
            continue
        if not is_valid_email(email):
            raise ParseFailure(INVALID_EMAIL_FORMAT, f"Invalid email format: {email}")

        attendees.append(
            AttendeeRecord(
                name=row[0].strip(),
                email=email,
                duration=parse_duration(row[2] if len(row) > 2 else ""),
            )
        )

    if not attendees:
        raise ParseFailure(
            NO_ATTENDEES,
            "CSV must contain at least one valid attendee with email address",
        )
    return attendees


_PARSERS: Dict[Dialect, Callable[[str], MeetingRecord]] = {
    Dialect.SECTIONED: parse_sectioned,
    Dialect.SIMPLE: parse_simple,
}
