from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.exceptions import ValidationError


def parse_datetime(value, field_name: str = "date") -> datetime:
    """Accept a datetime, a date, or an ISO 8601 string ('2024-06-03' or '2024-06-03T09:00')."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field_name} is required")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]
    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError as e:
        raise ValidationError(f"{field_name} must be an ISO date") from e


def parse_optional_datetime(value, field_name: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return parse_datetime(value, field_name)


def parse_hhmm(value: Optional[str], field_name: str) -> Optional[time]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError as e:
        raise ValidationError(f"{field_name} must be HH:MM") from e


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def day_window(moment: datetime) -> tuple[datetime, datetime]:
    start = start_of_day(moment)
    return start, start + timedelta(days=1)


def week_window(moment: datetime) -> tuple[datetime, datetime]:
    """Monday-start ISO week containing ``moment``, as [start, end)."""
    start = start_of_day(moment) - timedelta(days=moment.weekday())
    return start, start + timedelta(days=7)


def iso_week_number(moment: date) -> int:
    return moment.isocalendar()[1]


def week_start_for(week: int, year: int) -> datetime:
    try:
        return datetime.combine(date.fromisocalendar(year, week, 1), time.min)
    except ValueError as e:
        raise ValidationError("Invalid week number or year") from e


def now_local() -> datetime:
    """Current local time. Services take it as their default ``clock``."""
    return datetime.now()


def to_iso(value: Optional[datetime | date]) -> Optional[str]:
    return value.isoformat() if value else None
