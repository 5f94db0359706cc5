from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from ..core.exceptions import ConfigurationError, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_time_of_day(value: object) -> time:
    """Accept ``time`` or 'HH:MM' / 'HH:MM:SS' strings."""
    if isinstance(value, time):
        return value
    v = str(value or "").strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def duration_hours(start: time, end: time) -> float:
    """Hours between two times of the same day, rounded to the minute.

    Overnight or zero-length ranges are rejected.
    """
    start_minutes = start.hour * 60 + start.minute + round(start.second / 60)
    end_minutes = end.hour * 60 + end.minute + round(end.second / 60)
    if end_minutes <= start_minutes:
        raise ConfigurationError(
            f"Time range {format_time(start)}-{format_time(end)} must start before it ends within one day"
        )
    return round((end_minutes - start_minutes) / 60, 4)


def add_hours_to_time(start: time, hours: float) -> time:
    """Shift a time of day by ``hours`` rounded to whole minutes.

    Raises ConfigurationError if the result leaves the day.
    """
    base = datetime.combine(date(2000, 1, 1), start)
    end = base + timedelta(minutes=round(hours * 60))
    if end.date() != base.date():
        raise ConfigurationError(f"{format_time(start)} + {hours}h crosses midnight")
    return end.time()


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every local date in the inclusive range."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_start_of(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def resolve_zone(tz: tzinfo | str | None, default: str = "UTC") -> tzinfo:
    if tz is None:
        return ZoneInfo(default)
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def now_local() -> datetime:
    """Naive wall-clock now; lifecycle timestamps go through here."""
    return datetime.now()


def local_date(moment: date | datetime, tz: tzinfo) -> date:
    """Calendar date of ``moment`` in the reference zone ``tz``.

    Aware datetimes are converted; naive datetimes are taken as already
    expressed in ``tz``; plain dates are returned unchanged.
    """
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            return moment.astimezone(tz).date()
        return moment.date()
    return moment


def to_zone_naive(moment: date | datetime, tz: tzinfo) -> date | datetime:
    """Aware datetimes become naive wall-clock time in ``tz``; dates and naive values pass through."""
    if isinstance(moment, datetime) and moment.tzinfo is not None:
        return moment.astimezone(tz).replace(tzinfo=None)
    return moment


def today_in_zone(now: Optional[datetime], tz: tzinfo) -> date:
    if now is None:
        return datetime.now(tz).date()
    return local_date(now, tz)
