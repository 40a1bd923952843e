# tests/test_summary_renderer.py
import io
from datetime import datetime, timedelta

import pytest
from openpyxl import load_workbook

from app.services.summary_renderer import (
    SummaryData,
    format_duration,
    meeting_key,
    render_html_table,
    render_xlsx,
)


def _summary() -> SummaryData:
    data = SummaryData()
    standup = meeting_key("Standup", datetime(2024, 1, 15, 9, 0))
    review = meeting_key("Review <Q1>", datetime(2024, 1, 16, 14, 0))
    data.add("ann@example.com", standup, timedelta(minutes=15))
    data.add("bob@example.com", standup, timedelta(minutes=10))
    data.add("ann@example.com", review, timedelta(hours=1, minutes=5))
    return data


@pytest.mark.parametrize(
    "duration, expected",
    [
        (timedelta(0), "-"),
        (timedelta(seconds=73), "1 min"),
        (timedelta(seconds=30), "0 min"),
        (timedelta(minutes=45), "45 min"),
        (timedelta(hours=2), "2 hr"),
        (timedelta(hours=1, minutes=13, seconds=59), "1 hr 13 min"),
    ],
)
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


def test_meeting_key_uses_title_and_date():
    assert meeting_key("Standup", datetime(2024, 1, 15, 9, 30)) == "Standup (2024-01-15)"


def test_summary_data_keeps_first_seen_order_and_sums_repeats():
    data = _summary()
    data.add("bob@example.com", "Standup (2024-01-15)", timedelta(minutes=5))

    assert data.meeting_headers == ["Standup (2024-01-15)", "Review <Q1> (2024-01-16)"]
    assert data.attendant_emails == ["ann@example.com", "bob@example.com"]
    assert data.duration_for("bob@example.com", "Standup (2024-01-15)") == timedelta(minutes=15)
    assert data.duration_for("bob@example.com", "Review <Q1> (2024-01-16)") == timedelta(0)


def test_render_html_table_escapes_and_formats():
    html_table = render_html_table(_summary())

    assert html_table.startswith("<table")
    assert html_table.endswith("</table>")
    assert "<th>Attendant Email</th>" in html_table
    assert "<th>Review &lt;Q1&gt; (2024-01-16)</th>" in html_table
    assert "<td>ann@example.com</td>" in html_table
    assert ">1 hr 5 min</td>" in html_table
    # Bob did not attend the review.
    assert html_table.count(">-</td>") == 1


def test_render_html_table_for_empty_summary():
    html_table = render_html_table(SummaryData())

    assert "<th>Attendant Email</th>" in html_table
    assert "<tbody></tbody>" in html_table


def test_render_xlsx_round_trips_through_openpyxl():
    content = render_xlsx(_summary())

    workbook = load_workbook(io.BytesIO(content))
    sheet = workbook["Meeting Attendance Summary"]
    rows = [tuple(cell.value for cell in row) for row in sheet.iter_rows()]

    assert rows[0] == ("Attendant Email", "Standup (2024-01-15)", "Review <Q1> (2024-01-16)")
    assert rows[1] == ("ann@example.com", "15 min", "1 hr 5 min")
    assert rows[2] == ("bob@example.com", "10 min", "-")
    assert sheet["A1"].font.bold is True
