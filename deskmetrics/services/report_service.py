"""
Exportable report service.

A report combines the dashboard metrics with per-site, per-assignee and
per-category breakdowns for a required date window. Site and assignee rows are
recomputed with their own targeted queries rather than sliced out of the
global metrics, so each row is consistent on its own.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from uuid import UUID

from deskmetrics.core.async_utils import gather, gather_async
from deskmetrics.core.constants import (
    TOP_CATEGORIES_LIMIT,
    UNKNOWN_ASSIGNEE_NAME,
    UNKNOWN_SITE_NAME,
)
from deskmetrics.core.structured_logging import build_log_context
from deskmetrics.db.enums import CLOSED_CASE_STATES, OPEN_CASE_STATES
from deskmetrics.schemas.filters import TimeWindow, make_window
from deskmetrics.schemas.report import (
    AssigneeBreakdown,
    CategoryShare,
    ExportSection,
    Report,
    ReportPeriod,
    SiteBreakdown,
)
from deskmetrics.services.analytics_shared import mean, mean_resolution_hours, percentage, round2
from deskmetrics.services.metrics_service import compute_general_metrics
from deskmetrics.stores.sources import DataSources

logger = logging.getLogger(__name__)


# =============================================================================
# Breakdowns
# =============================================================================

async def _site_row(
    sources: DataSources,
    window: TimeWindow,
    site_id: UUID,
) -> SiteBreakdown:
    cases = sources.cases
    site, total, open_count, closed_count, scores = await gather(
        partial(cases.get_site, site_id),
        partial(cases.count_cases, window=window, site_id=site_id),
        partial(cases.count_cases, window=window, site_id=site_id, states=OPEN_CASE_STATES),
        partial(cases.count_cases, window=window, site_id=site_id, states=CLOSED_CASE_STATES),
        partial(sources.surveys.completed_scores, window=window, site_id=site_id),
    )
    return SiteBreakdown(
        site=site.name if site else UNKNOWN_SITE_NAME,
        total=total,
        open=open_count,
        closed=closed_count,
        avg_score=round2(mean(scores)),
        site_id=site_id,
    )


async def cases_by_site(
    sources: DataSources,
    window: TimeWindow,
    site_id: UUID | None = None,
) -> list[SiteBreakdown]:
    """One row per site with cases in the window (only ``site_id`` when given)."""
    (groups,) = await gather(
        partial(sources.cases.group_by_site, window=window, site_id=site_id)
    )
    return await gather_async(*(_site_row(sources, window, group_site) for group_site, _ in groups))


async def _assignee_row(
    sources: DataSources,
    window: TimeWindow,
    assignee_id: UUID,
    site_id: UUID | None,
) -> AssigneeBreakdown:
    cases = sources.cases
    scope = {"window": window, "site_id": site_id, "assignee_id": assignee_id}
    assignee, total, resolved, scores, durations = await gather(
        partial(cases.get_assignee, assignee_id),
        partial(cases.count_cases, **scope),
        partial(cases.count_cases, states=CLOSED_CASE_STATES, **scope),
        partial(sources.surveys.completed_scores, **scope),
        partial(cases.closed_case_durations, **scope),
    )
    return AssigneeBreakdown(
        assignee=assignee.full_name if assignee else UNKNOWN_ASSIGNEE_NAME,
        total=total,
        resolved=resolved,
        pending=total - resolved,
        avg_score=round2(mean(scores)),
        avg_resolution_hours=round2(mean_resolution_hours(durations)),
        assignee_id=assignee_id,
    )


async def cases_by_assignee(
    sources: DataSources,
    window: TimeWindow,
    site_id: UUID | None = None,
) -> list[AssigneeBreakdown]:
    """One row per assignee with cases in the window; unassigned cases are skipped."""
    (groups,) = await gather(
        partial(sources.cases.group_by_assignee, window=window, site_id=site_id)
    )
    return await gather_async(
        *(_assignee_row(sources, window, assignee_id, site_id) for assignee_id, _ in groups)
    )


def category_shares(counts: list[tuple[str, int]]) -> list[CategoryShare]:
    """Percentages relative to the listed categories, not to every case in scope."""
    listed_total = sum(count for _, count in counts)
    return [
        CategoryShare(
            category=category,
            count=count,
            percentage=round2(percentage(count, listed_total)),
        )
        for category, count in counts
    ]


async def top_categories(
    sources: DataSources,
    window: TimeWindow,
    site_id: UUID | None = None,
) -> list[CategoryShare]:
    (counts,) = await gather(
        partial(
            sources.cases.top_categories,
            window=window,
            site_id=site_id,
            limit=TOP_CATEGORIES_LIMIT,
        )
    )
    return category_shares(counts)


# =============================================================================
# Report
# =============================================================================

async def generate_report(
    sources: DataSources,
    start: datetime | None,
    end: datetime | None,
    site_id: UUID | None = None,
    now: datetime | None = None,
) -> Report:
    """
    Build the four-part report for [start, end).

    Both bounds are required; a missing bound raises ValidationError before any
    store is queried.
    """
    window = make_window(start, end, required=True)
    log_context = build_log_context(
        operation="generate_report",
        site_id=str(site_id) if site_id else None,
        window_start=window.start,
        window_end=window.end,
    )
    logger.info("Generating report", extra=log_context)

    metrics, by_site, by_assignee, categories = await gather_async(
        compute_general_metrics(sources, window, site_id, now=now),
        cases_by_site(sources, window, site_id),
        cases_by_assignee(sources, window, site_id),
        top_categories(sources, window, site_id),
    )

    logger.info(
        "Report generated sites=%d assignees=%d categories=%d",
        len(by_site),
        len(by_assignee),
        len(categories),
        extra=log_context,
    )
    return Report(
        period=ReportPeriod(start=window.start, end=window.end),
        site_id=site_id,
        metrics=metrics,
        by_site=by_site,
        by_assignee=by_assignee,
        top_categories=categories,
    )


# =============================================================================
# Export layout
# =============================================================================

SUMMARY_COLUMNS = ["metric", "value"]
SITE_COLUMNS = ["site", "total", "open", "closed", "avg_score"]
ASSIGNEE_COLUMNS = ["assignee", "total", "resolved", "pending", "avg_score", "avg_resolution_hours"]
CATEGORY_COLUMNS = ["category", "count", "percentage"]


def _summary_rows(report: Report) -> list[list[str | int | float]]:
    m = report.metrics
    states = m.cases_by_state
    return [
        ["period_start", report.period.start.isoformat()],
        ["period_end", report.period.end.isoformat()],
        # Cases
        ["total_cases", m.total_cases],
        ["open_cases", m.open_cases],
        ["closed_cases", m.closed_cases],
        # Cases by state
        ["state_new", states.new],
        ["state_assigned", states.assigned],
        ["state_in_progress", states.in_progress],
        ["state_on_visit", states.on_visit],
        ["state_awaiting_parts", states.awaiting_parts],
        ["state_closed", states.closed],
        # Satisfaction
        ["satisfaction_score", m.satisfaction_score],
        ["total_surveys", m.total_surveys],
        ["completed_surveys", m.completed_surveys],
        ["response_rate_pct", m.response_rate_pct],
        # Performance
        ["avg_resolution_hours", m.avg_resolution_hours],
        ["avg_first_response_minutes", m.avg_first_response_minutes],
        ["first_contact_resolutions", m.first_contact_resolutions],
        # SLA
        ["sla_within_cases", m.sla_within_cases],
        ["sla_breached_cases", m.sla_breached_cases],
        ["sla_compliance_pct", m.sla_compliance_pct],
    ]


def build_export_sections(report: Report) -> list[ExportSection]:
    """The four sheets the spreadsheet writer renders, in order.

    Column names and order are the writer's contract; change them only
    together with the writer.
    """
    return [
        ExportSection(
            name="summary",
            title="Summary",
            columns=SUMMARY_COLUMNS,
            rows=_summary_rows(report),
        ),
        ExportSection(
            name="by_site",
            title="Cases by Site",
            columns=SITE_COLUMNS,
            rows=[[r.site, r.total, r.open, r.closed, r.avg_score] for r in report.by_site],
        ),
        ExportSection(
            name="by_assignee",
            title="Cases by Assignee",
            columns=ASSIGNEE_COLUMNS,
            rows=[
                [r.assignee, r.total, r.resolved, r.pending, r.avg_score, r.avg_resolution_hours]
                for r in report.by_assignee
            ],
        ),
        ExportSection(
            name="top_categories",
            title="Top Categories",
            columns=CATEGORY_COLUMNS,
            rows=[[c.category, c.count, c.percentage] for c in report.top_categories],
        ),
    ]
