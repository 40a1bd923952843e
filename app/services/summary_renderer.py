# app/services/summary_renderer.py
from __future__ import annotations

import html
import io
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

ATTENDANT_EMAIL_HEADER = "Attendant Email"
WORKSHEET_TITLE = "Meeting Attendance Summary"
EMPTY_DURATION = "-"

_TABLE_OPEN = (
    "<table border='1' cellpadding='5' cellspacing='0' "
    "style='border-collapse: collapse; font-family: Arial, sans-serif;'>"
)
_HEADER_ROW_OPEN = "<tr style='background-color: #4CAF50; color: white;'>"
_CENTER_CELL_OPEN = "<td style='text-align: center;'>"

_HEADER_FILL = PatternFill(start_color="90EE90", end_color="90EE90", fill_type="solid")
_THIN = Side(style="thin")
_THIN_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def meeting_key(title: str, occurred_at: datetime) -> str:
    return f"{title} ({occurred_at:%Y-%m-%d})"


@dataclass
class SummaryData:
    """
    Attendance matrix for one upload batch: attendant email x meeting key.

    Meetings and emails keep the order in which they were first seen.
    """

    meeting_headers: List[str] = field(default_factory=list)
    attendant_emails: List[str] = field(default_factory=list)
    matrix: Dict[str, Dict[str, timedelta]] = field(default_factory=dict)

    def add(self, email: str, key: str, duration: timedelta) -> None:
        if key not in self.meeting_headers:
            self.meeting_headers.append(key)
        if email not in self.matrix:
            self.attendant_emails.append(email)
            self.matrix[email] = {}

        row = self.matrix[email]
        row[key] = row.get(key, timedelta(0)) + duration

    def duration_for(self, email: str, key: str) -> timedelta:
        return self.matrix.get(email, {}).get(key, timedelta(0))


def format_duration(duration: timedelta) -> str:
    """
    Human-readable duration: "-", "45 min", "2 hr" or "1 hr 13 min".

    Seconds are truncated, so anything under a minute renders as "0 min".
    """
    if duration == timedelta(0):
        return EMPTY_DURATION

    total_minutes = int(duration.total_seconds() // 60)
    if total_minutes < 60:
        return f"{total_minutes} min"

    hours, minutes = divmod(total_minutes, 60)
    if minutes == 0:
        return f"{hours} hr"
    return f"{hours} hr {minutes} min"


def render_html_table(data: SummaryData) -> str:
    parts: list[str] = [_TABLE_OPEN, "<thead>", _HEADER_ROW_OPEN]
    parts.append(f"<th>{ATTENDANT_EMAIL_HEADER}</th>")
    for key in data.meeting_headers:
        parts.append(f"<th>{html.escape(key)}</th>")
    parts.extend(["</tr>", "</thead>", "<tbody>"])

    for email in data.attendant_emails:
        parts.append("<tr>")
        parts.append(f"<td>{html.escape(email)}</td>")
        for key in data.meeting_headers:
            parts.append(f"{_CENTER_CELL_OPEN}{format_duration(data.duration_for(email, key))}</td>")
        parts.append("</tr>")

    parts.extend(["</tbody>", "</table>"])
    return "".join(parts)


def render_xlsx(data: SummaryData) -> bytes:
    """
    Render the attendance matrix as a single-sheet XLSX workbook.
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = WORKSHEET_TITLE

    headers = [ATTENDANT_EMAIL_HEADER, *data.meeting_headers]
    sheet.append(headers)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.fill = _HEADER_FILL

    for email in data.attendant_emails:
        sheet.append(
            [email, *(format_duration(data.duration_for(email, key)) for key in data.meeting_headers)]
        )

    center = Alignment(horizontal="center")
    for row in sheet.iter_rows(min_row=1, max_row=sheet.max_row, max_col=len(headers)):
        for cell in row:
            cell.border = _THIN_BORDER
            if cell.row > 1 and cell.column > 1:
                cell.alignment = center

    for column_cells in sheet.columns:
        width = max(len(str(cell.value or "")) for cell in column_cells)
        sheet.column_dimensions[column_cells[0].column_letter].width = width + 2

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
