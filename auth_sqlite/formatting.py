"""
Row <-> object conversion.

Rows come back from SQLite with dates stored as ISO-8601 text; the framework
expects ``datetime`` values. Writing goes the other way.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Mapping

# YYYY-MM-DDTHH:MM[:SS[.fff]] followed by Z or +HH:MM / -HH:MM
ISO_DATE_RE = re.compile(
    r"(?P<date>\d{4}-[01]\d-[0-3]\d)T"
    r"(?P<hm>[0-2]\d:[0-5]\d)"
    r"(?::(?P<sec>[0-5]\d)(?:\.(?P<frac>\d+))?)?"
    r"(?P<tz>Z|[+-][0-2]\d:[0-5]\d)"
)


def parse_iso_date(value: Any) -> dt.datetime | None:
    """Return an aware UTC datetime if ``value`` is an ISO date-time string, else None."""
    if not isinstance(value, str) or not value:
        return None
    m = ISO_DATE_RE.fullmatch(value.strip())
    if m is None:
        return None
    sec = m.group("sec") or "00"
    # fromisoformat wants exactly 6 fractional digits on older interpreters
    frac = (m.group("frac") or "")[:6].ljust(6, "0")
    tz = "+00:00" if m.group("tz") == "Z" else m.group("tz")
    try:
        parsed = dt.datetime.fromisoformat(f"{m.group('date')}T{m.group('hm')}:{sec}.{frac}{tz}")
    except ValueError:
        return None
    return parsed.astimezone(dt.timezone.utc)


def to_iso_string(value: dt.datetime) -> str:
    """Serialize like JavaScript's ``Date.toISOString()``: UTC, milliseconds, ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    value = value.astimezone(dt.timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def object_from_row(row: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Takes a database row and converts it for the framework. Empty rows give None."""
    if not row:
        return None
    out: dict[str, Any] = {}
    for key in row.keys():
        value = row[key]
        parsed = parse_iso_date(value)
        out[key] = parsed if parsed is not None else value
    return out or None


def insertable_from_object(obj: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Takes an object from the framework and prepares it to be written. Empty gives None."""
    if not obj:
        return None
    out: dict[str, Any] = {}
    for key, value in obj.items():
        # date is a superclass of datetime; plain dates serialize at midnight UTC
        if isinstance(value, dt.datetime):
            out[key] = to_iso_string(value)
        elif isinstance(value, dt.date):
            out[key] = to_iso_string(dt.datetime(value.year, value.month, value.day))
        else:
            out[key] = value
    return out
