"""Time Utilities - timezone-aware UTC timestamps

Stored and rendered timestamps use ISO-8601 with millisecond precision and a
"Z" suffix, e.g. 2026-01-05T12:00:00.000Z.
"""
from datetime import date, datetime, timezone
from dateutil import parser as date_parser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def format_iso(dt: datetime) -> str:
    """
    Render a datetime as ISO-8601 UTC text

    Naive datetimes are taken to be UTC already.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO-8601 text (date or date-time) into an aware datetime

    Raises:
        ValueError: The text is not ISO-8601
    """
    dt = date_parser.isoparse(iso_string)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def elapsed_ms(started: float, finished: float) -> float:
    """Milliseconds between two perf_counter readings, rounded to 0.01ms"""
    return round((finished - started) * 1000, 2)
