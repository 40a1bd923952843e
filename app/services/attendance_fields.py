# app/services/attendance_fields.py
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# Simplified RFC 5322 address: permissive local part, dot-separated DNS labels.
EMAIL_PATTERN = re.compile(
    r"[a-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?"
    r"(?:\.[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)*",
    re.IGNORECASE,
)

_UNIT_DURATION = re.compile(r"(?:(\d+)h)?\s*(?:(\d+)m)?\s*(?:(\d+)s)?")
_MINUTE_SUFFIX = re.compile(r"\s*(?:minutes|minute|mins|min)\s*$", re.IGNORECASE)
_INTERVAL_LITERAL = re.compile(
    r"(?:(?P<days>\d+)\.)?(?P<hours>\d+):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?"
)

# Layouts seen in attendance exports, tried after ISO 8601. US month-first
# layouts come first, so an ambiguous "01/02/2025 10:00:00" is January 2nd.
DATETIME_FORMATS: tuple[str, ...] = (
    "%m/%d/%y, %I:%M:%S %p",
    "%m/%d/%Y, %I:%M:%S %p",
    "%m/%d/%y, %I:%M %p",
    "%m/%d/%Y, %I:%M %p",
    "%m/%d/%y %I:%M:%S %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%y %I:%M %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%y",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d.%m.%Y, %H:%M:%S",
    "%d.%m.%y, %H:%M:%S",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
    "%d/%m/%Y, %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
)


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def parse_duration(text: str | None) -> timedelta:
    """
    Parse a free-form attendance duration.

    Rules
    -----
    Tried in order, first success wins:
    1) unit form such as "1h 13m 5s", "1m 13s" or "30m" (non-zero total)
    2) a bare minute count, optionally suffixed with min/mins/minute/minutes
    3) an interval literal such as "1:02:03", "0:45" or "1.02:00:00"
    4) anything else is a zero duration

    Never raises and never returns a negative interval.
    """
    if text is None:
        return timedelta(0)

    value = text.strip()
    if not value:
        return timedelta(0)

    for parser in (_parse_unit_duration, _parse_minutes_only, _parse_interval_literal):
        parsed = parser(value)
        if parsed is not None:
            return parsed

    return timedelta(0)


def _parse_unit_duration(value: str) -> Optional[timedelta]:
    match = _UNIT_DURATION.match(value)
    if match is None:
        return None

    hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    if hours == 0 and minutes == 0 and seconds == 0:
        return None
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def _parse_minutes_only(value: str) -> Optional[timedelta]:
    cleaned = _MINUTE_SUFFIX.sub("", value).strip()
    if not cleaned.isdigit():
        return None
    return timedelta(minutes=int(cleaned))


def _parse_interval_literal(value: str) -> Optional[timedelta]:
    match = _INTERVAL_LITERAL.fullmatch(value)
    if match is None:
        return None

    days = int(match.group("days") or 0)
    hours = int(match.group("hours"))
    minutes = int(match.group("minutes"))
    seconds = int(match.group("seconds") or 0)
    fraction = match.group("fraction") or "0"

    if hours > 23 or minutes > 59 or seconds > 59:
        return None

    return timedelta(
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        microseconds=int(fraction.ljust(6, "0")[:6]),
    )


def parse_datetime(text: str | None) -> Optional[datetime]:
    """
    Parse a meeting date/time as written in an attendance export.

    ISO 8601 is tried first, then the layouts in DATETIME_FORMATS. Values
    with a UTC offset are converted to naive UTC, matching the other layouts
    which carry no zone. Returns None if nothing matches.
    """
    if not text:
        return None

    # Exports may use (narrow) no-break spaces before AM/PM.
    value = text.replace("\u202f", " ").replace("\xa0", " ").strip()
    if not value:
        return None

    try:
        return _as_naive_utc(datetime.fromisoformat(value))
    except ValueError:
        pass

    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    return None


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
