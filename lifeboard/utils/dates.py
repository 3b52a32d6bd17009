"""
Date/time helpers.

Usage:
    from lifeboard.utils.dates import utcnow, parse_datetime, parse_day

    parse_datetime("2025-01-05")            -> 2025-01-05 00:00:00+00:00
    parse_datetime("2025-01-05T10:30:00")   -> 2025-01-05 10:30:00+00:00
    parse_day("2025-01-05T18:00:00")        -> date(2025, 1, 5)

All datetimes inside documents are timezone-aware UTC; naive input is treated as UTC.
"""
import re
from datetime import datetime, date, timezone

from lifeboard.domain.errors import ValidationError

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive → UTC, aware → converted to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value, field: str = "date") -> datetime:
    """
    Разобрать дату/время из строки ISO, date или datetime

    Raises:
        ValidationError: если формат некорректный
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return as_utc(datetime.fromisoformat(raw))
        except ValueError:
            pass
    raise ValidationError(f"Invalid {field} format. Please use YYYY-MM-DD")


def parse_optional_datetime(value, field: str = "date") -> datetime | None:
    if value is None or value == "":
        return None
    return parse_datetime(value, field)


def parse_day(value, field: str = "date") -> date:
    """Calendar day of the given value (time part dropped)"""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_datetime(value, field).date()


def to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def from_iso(value: str | None) -> datetime | None:
    if value is None:
        return None
    return as_utc(datetime.fromisoformat(value))


def validate_hhmm(value: str, field: str) -> str:
    """Время в формате HH:MM (24 часа)"""
    if not isinstance(value, str) or not _TIME_RE.match(value):
        raise ValidationError(f"Invalid {field}. Use HH:MM (24-hour format)")
    return value


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """[first moment of month, first moment of next month)"""
    if not 1 <= month <= 12:
        raise ValidationError("Month must be 1..12")
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end
