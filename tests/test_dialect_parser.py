# tests/test_dialect_parser.py
from datetime import date, datetime, timedelta

import pytest

from app.core.exceptions import ParseFailure
from app.schemas.upload import Dialect
from app.services.dialect_parser import detect_dialect, parse, parse_sectioned, parse_simple
from tests.samples import JAN_NOWAK_REPORT, SIMPLE_REPORT, sectioned_report


def _error_code(text: str) -> str:
    with pytest.raises(ParseFailure) as exc_info:
        parse(text)
    return exc_info.value.error_code


# ---------------------------------------------------------------------------
# Dialect detection
# ---------------------------------------------------------------------------

def test_detect_dialect_sectioned_by_markers():
    assert detect_dialect(JAN_NOWAK_REPORT) is Dialect.SECTIONED
    assert detect_dialect("2. Participants\nName\tEmail") is Dialect.SECTIONED


def test_detect_dialect_sectioned_by_fields():
    text = "Meeting title\tStandup\nName\tParticipant ID (UPN)\n"
    assert detect_dialect(text) is Dialect.SECTIONED


def test_detect_dialect_simple():
    assert detect_dialect(SIMPLE_REPORT) is Dialect.SIMPLE


# ---------------------------------------------------------------------------
# Sectioned dialect
# ---------------------------------------------------------------------------

def test_parse_jan_nowak_report():
    """
    The real-world single-participant report parses into one attendee
    with a 73 second duration.
    """
    record = parse(JAN_NOWAK_REPORT)

    assert record.dialect is Dialect.SECTIONED
    assert record.title == "Meeting with Jan Nowak"
    assert record.occurred_at == datetime(2025, 11, 26, 16, 16, 54)
    assert len(record.attendees) == 1

    attendee = record.attendees[0]
    assert attendee.name == "Jan Nowak"
    assert attendee.email == "j.nowak@gmail.com"
    assert attendee.duration == timedelta(seconds=73)


def test_parse_sectioned_keeps_row_order():
    rows = [(f"Person {i}", f"{i}m", f"person{i}@example.com") for i in range(1, 8)]

    record = parse(sectioned_report(rows))

    assert [a.email for a in record.attendees] == [r[2] for r in rows]
    assert [a.duration for a in record.attendees] == [timedelta(minutes=i) for i in range(1, 8)]


def test_parse_sectioned_with_crlf_line_endings():
    record = parse(JAN_NOWAK_REPORT.replace("\n", "\r\n"))

    assert record.title == "Meeting with Jan Nowak"
    assert len(record.attendees) == 1


def test_parse_sectioned_stops_at_next_section():
    """
    Rows of the "3. In-Meeting Activities" section are not attendees.
    """
    text = sectioned_report([("Ann", "5m", "ann@example.com")]).rstrip("\n") + (
        "\n3. In-Meeting Activities\n"
        "Name\tJoin Time\tLeave Time\tDuration\tEmail\tRole\n"
        "Bob\t1/8/25\t1/8/25\t5m\tbob@example.com\tAttendee\n"
    )

    record = parse(text)

    assert [a.email for a in record.attendees] == ["ann@example.com"]


def test_parse_sectioned_skips_rows_without_email_and_short_rows():
    text = sectioned_report(
        [
            ("Ann", "5m", "ann@example.com"),
            ("Guest", "3m", ""),
        ]
    ) + "Broken\trow\n"

    record = parse(text)

    assert [a.email for a in record.attendees] == ["ann@example.com"]


def test_parse_sectioned_missing_summary_section():
    text = JAN_NOWAK_REPORT.replace("1. Summary", "Summary")

    assert _error_code(text) == "MISSING_SUMMARY_SECTION"


def test_parse_sectioned_missing_participants_section():
    text = JAN_NOWAK_REPORT.replace("2. Participants", "Participants")

    assert _error_code(text) == "MISSING_PARTICIPANTS_SECTION"


def test_parse_sectioned_missing_title():
    text = JAN_NOWAK_REPORT.replace("Meeting title\tMeeting with Jan Nowak", "Meeting title\t ")

    assert _error_code(text) == "MISSING_MEETING_TITLE"


def test_parse_sectioned_missing_start_time():
    text = JAN_NOWAK_REPORT.replace("Start time\t11/26/25, 4:16:54 PM\n", "")

    assert _error_code(text) == "MISSING_START_TIME"


def test_parse_sectioned_invalid_start_time():
    text = JAN_NOWAK_REPORT.replace("11/26/25, 4:16:54 PM\nEnd", "yesterday afternoon\nEnd")

    assert _error_code(text) == "INVALID_DATE_FORMAT"


def test_parse_sectioned_invalid_header():
    text = JAN_NOWAK_REPORT.replace("In-Meeting Duration", "Time in meeting", 1)

    assert _error_code(text) == "INVALID_HEADER"


def test_parse_sectioned_single_bad_email_fails_whole_file():
    text = sectioned_report(
        [
            ("Ann", "5m", "ann@example.com"),
            ("Bob", "5m", "not-an-email"),
            ("Cid", "5m", "cid@example.com"),
        ]
    )

    with pytest.raises(ParseFailure) as exc_info:
        parse(text)

    assert exc_info.value.error_code == "INVALID_EMAIL_FORMAT"
    assert "not-an-email" in exc_info.value.message


def test_parse_sectioned_no_attendees():
    text = sectioned_report([("Guest", "3m", "")])

    assert _error_code(text) == "NO_ATTENDEES"


def test_parse_sectioned_without_participant_rows():
    text = "1. Summary\nMeeting title\tX\nStart time\t1/8/25, 9:00:00 AM\n2. Participants\n"

    assert _error_code(text) == "NO_ATTENDEES"


def test_parse_sectioned_unparseable_duration_is_zero():
    record = parse(sectioned_report([("Ann", "n/a", "ann@example.com")]))

    assert record.attendees[0].duration == timedelta(0)


def test_parse_is_repeatable():
    """
    Parsing the same text twice yields attendee lists equal by value.
    """
    first = parse_sectioned(JAN_NOWAK_REPORT)
    second = parse_sectioned(JAN_NOWAK_REPORT)

    assert first.attendees == second.attendees


# ---------------------------------------------------------------------------
# Simple dialect
# ---------------------------------------------------------------------------

def test_parse_simple_report():
    record = parse(SIMPLE_REPORT)

    assert record.dialect is Dialect.SIMPLE
    assert record.title == "Team Meeting"
    assert record.occurred_at.date() == date(2024, 1, 15)
    assert len(record.attendees) == 1
    assert record.attendees[0].name == "John Doe"
    assert record.attendees[0].email == "john@example.com"
    assert record.attendees[0].duration == timedelta(minutes=45)


def test_parse_simple_quoted_fields():
    text = (
        '"Quarterly ""All Hands""",2024-03-01\n'
        "Name,Email,Duration\n"
        '"Doe, John",john@example.com,"1h 5m"\n'
        '"Smith ""JJ"" Jane",jane@example.com,30 min\n'
    )

    record = parse_simple(text)

    assert [a.name for a in record.attendees] == ["Doe, John", 'Smith "JJ" Jane']
    assert record.attendees[0].duration == timedelta(hours=1, minutes=5)
    assert record.attendees[1].duration == timedelta(minutes=30)


def test_parse_simple_title_without_date_defaults_to_now():
    before = datetime.now()
    record = parse("Ad-hoc call\nName,Email\nAnn,ann@example.com\n")
    after = datetime.now()

    assert record.title == "Ad-hoc call"
    assert before <= record.occurred_at <= after
    assert record.attendees[0].duration == timedelta(0)


def test_parse_simple_skips_malformed_rows():
    text = (
        "Team Meeting,2024-01-15\n"
        "Name,Email,Duration\n"
        "only-one-column\n"
        "No Email,,10\n"
        "Ann,ann@example.com,10\n"
    )

    record = parse(text)

    assert [a.email for a in record.attendees] == ["ann@example.com"]


def test_parse_simple_insufficient_data():
    assert _error_code("Team Meeting,2024-01-15\nName,Email\n\n") == "INSUFFICIENT_DATA"


def test_parse_simple_invalid_date():
    text = SIMPLE_REPORT.replace("2024-01-15", "someday")

    assert _error_code(text) == "INVALID_DATE_FORMAT"


def test_parse_simple_missing_title():
    text = SIMPLE_REPORT.replace("Team Meeting", '""')

    assert _error_code(text) == "MISSING_TITLE"


def test_parse_simple_invalid_header():
    text = SIMPLE_REPORT.replace("Name,Email,Duration", "Who,Address,Duration")

    assert _error_code(text) == "INVALID_HEADER"


def test_parse_simple_header_is_case_insensitive():
    text = SIMPLE_REPORT.replace("Name,Email,Duration", "FULL NAME,EMAIL ADDRESS,DURATION")

    record = parse(text)

    assert record.attendees[0].email == "john@example.com"


def test_parse_simple_invalid_email():
    text = SIMPLE_REPORT + "Bad Row,not-an-email,10\n"

    assert _error_code(text) == "INVALID_EMAIL_FORMAT"


def test_parse_simple_no_attendees():
    text = "Team Meeting,2024-01-15\nName,Email\nGuest,,5\n"

    assert _error_code(text) == "NO_ATTENDEES"


def test_parse_blank_text():
    assert _error_code("  \n\t\n") == "EMPTY_CONTENT"


def test_parse_simple_offset_date_is_stored_as_naive_utc():
    text = SIMPLE_REPORT.replace("2024-01-15", "2024-01-15T10:00:00+02:00")

    record = parse(text)

    assert record.occurred_at == datetime(2024, 1, 15, 8, 0)
    assert record.occurred_at.tzinfo is None


def test_parse_sectioned_day_first_start_time():
    text = sectioned_report(
        [("Ann", "5m", "ann@example.com")],
        start_time="26.11.2025, 16:16:54",
    )

    record = parse(text)

    assert record.occurred_at == datetime(2025, 11, 26, 16, 16, 54)
