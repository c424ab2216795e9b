"""Case listing schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from deskmetrics.db.enums import CasePriority, CaseState


class SiteSummary(BaseModel):
    id: UUID
    name: str


class AssigneeSummary(BaseModel):
    id: UUID
    full_name: str
    email: str


class ReporterSummary(BaseModel):
    id: UUID
    full_name: str
    phone: str


class CaseView(BaseModel):
    """A case row with its derived fields."""

    id: UUID
    case_number: str
    state: CaseState
    priority: CasePriority
    category: str
    subcategory: str | None = None
    description: str | None = None
    unit: str | None = None
    reporter: ReporterSummary
    site: SiteSummary
    assignee: AssigneeSummary | None = None
    created_at: datetime
    closed_at: datetime | None = None
    resolution_minutes: float | None = None
    satisfaction_score: float | None = None
    sla_breached: bool
