"""Shared helpers for the metrics services."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from deskmetrics.utils.datetime_parsing import ensure_utc

_TWO_PLACES = Decimal("0.01")


def round2(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean; 0 for no values."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def percentage(part: int | float, whole: int | float, *, empty: float = 0.0) -> float:
    """part / whole x 100, or ``empty`` when whole is 0."""
    if not whole:
        return empty
    return part / whole * 100


def elapsed_hours(start: datetime, end: datetime) -> float:
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600


def elapsed_minutes(start: datetime, end: datetime) -> float:
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 60


def mean_resolution_hours(durations: Iterable[tuple[datetime, datetime]]) -> float:
    """Mean of closed - created, in hours, over (created, closed) pairs."""
    return mean(elapsed_hours(created, closed) for created, closed in durations)
