"""Datetime helpers for windows and CLI arguments."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

DATETIME_FORMATS: list[str] = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y-%m-%d",
    "%Y/%m/%d",
]


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (backends without tz support return naive values)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(raw_value: str) -> datetime:
    """Parse an ISO-8601 or common date/datetime string as UTC."""
    value = raw_value.strip()
    if not value:
        raise ValueError("empty datetime value")
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValueError(f"unrecognized datetime: {raw_value!r}")


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open UTC bounds of a calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def month_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open UTC bounds of the calendar month containing ``day``."""
    start = datetime.combine(day.replace(day=1), time.min, tzinfo=timezone.utc)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end
