"""Dashboard metric schemas."""

from pydantic import BaseModel

from deskmetrics.db.enums import CaseState


class StateBreakdown(BaseModel):
    """Case count per lifecycle state. Every state is always present."""

    new: int = 0
    assigned: int = 0
    in_progress: int = 0
    on_visit: int = 0
    awaiting_parts: int = 0
    closed: int = 0

    @classmethod
    def from_counts(cls, counts: dict[CaseState, int]) -> "StateBreakdown":
        return cls(**{state.value: counts.get(state, 0) for state in CaseState})

    @property
    def total(self) -> int:
        return sum(getattr(self, state.value) for state in CaseState)


class DashboardMetrics(BaseModel):
    # Cases
    open_cases: int
    closed_cases: int
    total_cases: int
    cases_by_state: StateBreakdown

    # Satisfaction (0-5)
    satisfaction_score: float
    total_surveys: int
    completed_surveys: int
    response_rate_pct: float

    # Performance
    avg_resolution_hours: float
    avg_first_response_minutes: int  # placeholder constant
    first_contact_resolutions: int  # placeholder estimate

    # Follow-ups
    active_follow_ups: int
    completed_follow_ups: int
    timed_out_closures: int

    # SLA
    sla_within_cases: int
    sla_breached_cases: int
    sla_compliance_pct: float


class MetricsOverview(BaseModel):
    """Metrics for today, the current month and all time."""

    today: DashboardMetrics
    this_month: DashboardMetrics
    all_time: DashboardMetrics
