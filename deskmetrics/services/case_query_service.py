"""Case listing with derived resolution time and SLA status."""

from __future__ import annotations

from datetime import datetime
from functools import partial

from deskmetrics.core.async_utils import gather
from deskmetrics.core.constants import (
    DEFAULT_CASE_PAGE_SIZE,
    EXPORT_CASE_PAGE_SIZE,
    SLA_THRESHOLD_HOURS,
)
from deskmetrics.db.enums import CaseState
from deskmetrics.db.models import Case
from deskmetrics.schemas.cases import AssigneeSummary, CaseView, ReporterSummary, SiteSummary
from deskmetrics.schemas.filters import CaseFilters
from deskmetrics.services.analytics_shared import elapsed_hours, elapsed_minutes
from deskmetrics.stores.sources import DataSources
from deskmetrics.utils.datetime_parsing import ensure_utc, utc_now
from deskmetrics.utils.pagination import PaginatedResponse, PaginationParams, get_pagination


def is_sla_breached(state: CaseState, created_at: datetime, now: datetime) -> bool:
    """Open for longer than the SLA threshold. Closed cases never breach."""
    return state != CaseState.CLOSED and elapsed_hours(created_at, now) > SLA_THRESHOLD_HOURS


def to_case_view(case: Case, now: datetime) -> CaseView:
    resolution_minutes = None
    if case.state == CaseState.CLOSED and case.closed_at is not None:
        resolution_minutes = elapsed_minutes(case.created_at, case.closed_at)

    assignee = None
    if case.assignee is not None:
        assignee = AssigneeSummary(
            id=case.assignee.id,
            full_name=case.assignee.full_name,
            email=case.assignee.email or "",
        )

    return CaseView(
        id=case.id,
        case_number=case.case_number,
        state=case.state,
        priority=case.priority,
        category=case.category,
        subcategory=case.subcategory,
        description=case.description,
        unit=case.unit,
        reporter=ReporterSummary(
            id=case.reporter.id,
            full_name=case.reporter.full_name,
            phone=case.reporter.phone or "",
        ),
        site=SiteSummary(id=case.site.id, name=case.site.name),
        assignee=assignee,
        created_at=ensure_utc(case.created_at),
        closed_at=ensure_utc(case.closed_at) if case.closed_at else None,
        resolution_minutes=resolution_minutes,
        satisfaction_score=(
            float(case.satisfaction_score) if case.satisfaction_score is not None else None
        ),
        sla_breached=is_sla_breached(case.state, case.created_at, now),
    )


async def list_cases(
    sources: DataSources,
    filters: CaseFilters | None = None,
    pagination: PaginationParams | None = None,
    now: datetime | None = None,
) -> PaginatedResponse[CaseView]:
    """Page of cases, newest first, enriched with site/assignee and derived fields."""
    filters = filters or CaseFilters()
    pagination = pagination or get_pagination(
        None,
        None,
        default_per_page=DEFAULT_CASE_PAGE_SIZE,
        max_per_page=EXPORT_CASE_PAGE_SIZE,
    )
    now = ensure_utc(now) if now else utc_now()

    cases, total = await gather(
        partial(sources.cases.list_cases, filters, pagination.offset, pagination.per_page),
        partial(sources.cases.count_filtered, filters),
    )
    items = [to_case_view(case, now) for case in cases]
    return PaginatedResponse[CaseView].create(items, total, pagination)


async def list_cases_for_export(
    sources: DataSources,
    filters: CaseFilters | None = None,
    now: datetime | None = None,
) -> PaginatedResponse[CaseView]:
    """Bulk retrieval: the first EXPORT_CASE_PAGE_SIZE matching cases."""
    pagination = PaginationParams(page=1, per_page=EXPORT_CASE_PAGE_SIZE)
    return await list_cases(sources, filters, pagination, now=now)
