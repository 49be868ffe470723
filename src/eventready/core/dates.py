"""Lenient date parsing for data-layer values - no I/O dependencies.

Rows arrive with dates as ``YYYY-MM-DD`` strings, ISO datetimes, ``date``
objects or nothing at all. Every helper here returns ``None`` instead of
raising so callers can treat unparseable values as "no date".
"""

from datetime import date, datetime, time, tzinfo


def parse_local_datetime(value: object, tz: tzinfo | None = None) -> datetime | None:
    """
    Parse a date-like value into a naive local datetime.

    Date-only values become local midnight. Offset-aware values are
    converted to ``tz`` (system local time when omitted) and made naive.
    Returns None for empty or unparseable input.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz).replace(tzinfo=None)
    return parsed


def parse_local_date(value: object, tz: tzinfo | None = None) -> date | None:
    """Parse a date-like value into a local calendar day, or None."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_local_datetime(value, tz)
    return parsed.date() if parsed else None


def round_half_up_percent(part: int, whole: int) -> int:
    """Integer percentage of part/whole, rounding .5 up. Zero when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)
