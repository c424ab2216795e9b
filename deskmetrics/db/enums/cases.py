"""Case, survey and follow-up enums."""

from enum import Enum


class CaseState(str, Enum):
    """Case lifecycle state."""

    NEW = "new"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    ON_VISIT = "on_visit"
    AWAITING_PARTS = "awaiting_parts"
    CLOSED = "closed"


OPEN_CASE_STATES = (
    CaseState.NEW,
    CaseState.ASSIGNED,
    CaseState.IN_PROGRESS,
    CaseState.ON_VISIT,
    CaseState.AWAITING_PARTS,
)
CLOSED_CASE_STATES = (CaseState.CLOSED,)


class CasePriority(str, Enum):
    """Case priority level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class SurveyState(str, Enum):
    """Satisfaction survey state."""

    PENDING = "pending"
    COMPLETED = "completed"


class FollowUpOutcome(str, Enum):
    """How an inactive follow-up ended."""

    CLOSED_WITHOUT_RESPONSE = "closed_without_response"
    CONFIRMED_RESOLVED = "confirmed_resolved"
    REOPENED = "reopened"
