"""Composite report schemas.

Field order in the breakdown models is the column order of the exported
sheets; see ``report_service.build_export_sections``.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from deskmetrics.schemas.metrics import DashboardMetrics


class ReportPeriod(BaseModel):
    start: datetime
    end: datetime


class SiteBreakdown(BaseModel):
    site: str
    total: int
    open: int
    closed: int
    avg_score: float
    site_id: UUID


class AssigneeBreakdown(BaseModel):
    assignee: str
    total: int
    resolved: int
    pending: int
    avg_score: float
    avg_resolution_hours: float
    assignee_id: UUID


class CategoryShare(BaseModel):
    category: str
    count: int
    percentage: float


class Report(BaseModel):
    period: ReportPeriod
    site_id: UUID | None = None
    metrics: DashboardMetrics
    by_site: list[SiteBreakdown]
    by_assignee: list[AssigneeBreakdown]
    top_categories: list[CategoryShare]


class ExportSection(BaseModel):
    """One sheet of the exported workbook: fixed columns, then rows."""

    name: str
    title: str
    columns: list[str]
    rows: list[list[str | int | float]]
