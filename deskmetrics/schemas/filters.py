"""Filter types accepted by the query services.

Every field is optional; an absent field leaves that dimension unfiltered.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from deskmetrics.core.errors import ValidationError
from deskmetrics.db.enums import CasePriority, CaseState
from deskmetrics.utils.datetime_parsing import ensure_utc


class TimeWindow(BaseModel):
    """Half-open [start, end) range. Bounds are stored in UTC; naive values are read as UTC."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _ordered(self) -> "TimeWindow":
        if self.start > self.end:
            raise ValueError("start date must not be after end date")
        return self


def make_window(
    start: datetime | None,
    end: datetime | None,
    *,
    required: bool = False,
) -> TimeWindow | None:
    """
    Build a window from optional bounds.

    Both bounds or neither: no bounds means all time (unless ``required``),
    a single bound is rejected.
    """
    if start is None and end is None:
        if required:
            raise ValidationError("start and end dates are required")
        return None
    if start is None or end is None:
        raise ValidationError("start and end dates must be supplied together")
    start, end = ensure_utc(start), ensure_utc(end)
    if start > end:
        raise ValidationError("start date must not be after end date")
    return TimeWindow(start=start, end=end)


class CaseFilters(BaseModel):
    """Filters for case listing."""

    model_config = ConfigDict(frozen=True)

    state: CaseState | None = None
    site_id: UUID | None = None
    assignee_id: UUID | None = None
    priority: CasePriority | None = None
    window: TimeWindow | None = None


class ConversationFilters(BaseModel):
    """Filters for conversation listing; the window applies to last activity."""

    model_config = ConfigDict(frozen=True)

    phone: str | None = None
    window: TimeWindow | None = None
