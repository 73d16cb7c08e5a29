from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta, timezone

__all__ = [
    "ZERO_TIME",
    "as_utc",
    "format_rfc3339",
    "format_rfc3339_nano",
    "parse_rfc3339",
]

# Zero value for `since`: the first instant of year 1, UTC.
ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))?",
    re.ASCII,
)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes and normalize zero offsets to `UTC`.

    Non-zero offsets are preserved so rendering keeps the caller's zone.
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=UTC)
    if dt.utcoffset() == timedelta(0):
        return dt.replace(tzinfo=UTC)
    return dt


def _offset(dt: datetime) -> str:
    off = dt.utcoffset() or timedelta(0)
    if off == timedelta(0):
        return "Z"
    sign = "+" if off > timedelta(0) else "-"
    minutes = abs(int(off.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_rfc3339(dt: datetime) -> str:
    """Second-precision RFC 3339, e.g. ``2006-01-02T15:04:05Z``."""
    dt = as_utc(dt)
    return f"{dt.year:04d}-{dt:%m-%dT%H:%M:%S}{_offset(dt)}"


def format_rfc3339_nano(dt: datetime) -> str:
    """RFC 3339 with fractional seconds, trailing zeros trimmed.

    ``2006-01-02T15:04:05.5Z``; whole seconds render without a fraction.
    """
    dt = as_utc(dt)
    frac = ""
    if dt.microsecond:
        frac = "." + f"{dt.microsecond:06d}".rstrip("0")
    return f"{dt.year:04d}-{dt:%m-%dT%H:%M:%S}{frac}{_offset(dt)}"


def parse_rfc3339(text: str) -> datetime:
    """Parse RFC 3339 with any number of fractional digits.

    Digits past microseconds are truncated, so nanosecond timestamps such as
    ``2006-01-02T15:04:05.123456789Z`` are accepted. A missing offset means UTC.

    Raises:
        ValueError: if `text` is not an RFC 3339 timestamp.
    """
    m = _RFC3339_RE.fullmatch(text)
    if m is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")
    year, month, day, hour, minute, second, frac, _zulu, sign, off_h, off_m = m.groups()
    tz = UTC
    if sign:
        offset = timedelta(hours=int(off_h), minutes=int(off_m))
        tz = timezone(-offset if sign == "-" else offset)
    micro = int((frac or "0")[:6].ljust(6, "0"))
    dt = datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
    )
    return as_utc(dt)
