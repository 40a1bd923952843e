# tests/samples.py
"""Attendance report fixtures shared by the test modules."""

JAN_NOWAK_REPORT = (
    "1. Summary\n"
    "Meeting title\tMeeting with Jan Nowak\n"
    "Attended participants\t1\n"
    "Start time\t11/26/25, 4:16:54 PM\n"
    "End time\t11/26/25, 4:18:08 PM\n"
    "Meeting duration\t1m 14s\n"
    "Average attendance time\t1m 13s\n"
    "\n"
    "2. Participants\n"
    "Name\tFirst Join\tLast Leave\tIn-Meeting Duration\tEmail\tParticipant ID (UPN)\tRole\n"
    "Jan Nowak\t11/26/25, 4:16:55 PM\t11/26/25, 4:18:08 PM\t1m 13s\t"
    "j.nowak@gmail.com\tj.nowak@gmail.com\tOrganizer\n"
    "\n"
    "3. In-Meeting Activities\n"
    "Name\tJoin Time\tLeave Time\tDuration\tEmail\tRole\n"
    "Jan Nowak\t11/26/25, 4:16:55 PM\t11/26/25, 4:18:08 PM\t1m 13s\t"
    "j.nowak@gmail.com\tOrganizer\n"
)

SIMPLE_REPORT = (
    "Team Meeting,2024-01-15\n"
    "Name,Email,Duration\n"
    "John Doe,john@example.com,45\n"
)

JSON_RESPONSE = (
    "{\n"
    '  "summaryId": 1,\n'
    '  "htmlTable": "<table>...</table>"\n'
    "}"
)


def sectioned_report(rows, title="Weekly Sync", start_time="1/8/25, 9:00:00 AM"):
    """
    Build a sectioned report from (name, duration, email) tuples.
    """
    lines = [
        "1. Summary",
        f"Meeting title\t{title}",
        f"Start time\t{start_time}",
        "",
        "2. Participants",
        "Name\tFirst Join\tLast Leave\tIn-Meeting Duration\tEmail\tParticipant ID (UPN)\tRole",
    ]
    for name, duration, email in rows:
        lines.append(f"{name}\t1/8/25, 9:00:00 AM\t1/8/25, 9:30:00 AM\t{duration}\t{email}\t{email}\tAttendee")
    return "\n".join(lines) + "\n"
