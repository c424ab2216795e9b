"""
Dashboard metrics service.

Every figure is recomputed from the stores on each call. The case, survey,
follow-up and SLA queries are independent of one another and run
concurrently; any store failure fails the whole call.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from functools import partial
from uuid import UUID

from deskmetrics.core.async_utils import gather, gather_async
from deskmetrics.core.constants import (
    PLACEHOLDER_FIRST_CONTACT_PERCENT,
    PLACEHOLDER_FIRST_RESPONSE_MINUTES,
    SLA_THRESHOLD_HOURS,
)
from deskmetrics.core.structured_logging import build_log_context
from deskmetrics.db.enums import CLOSED_CASE_STATES, OPEN_CASE_STATES, FollowUpOutcome
from deskmetrics.schemas.filters import TimeWindow
from deskmetrics.schemas.metrics import DashboardMetrics, MetricsOverview, StateBreakdown
from deskmetrics.services.analytics_shared import mean, mean_resolution_hours, percentage, round2
from deskmetrics.stores.sources import DataSources
from deskmetrics.utils.datetime_parsing import day_bounds, ensure_utc, month_bounds, utc_now

logger = logging.getLogger(__name__)


def sla_cutoff(now: datetime) -> datetime:
    """Open cases created before this instant are past the SLA."""
    return ensure_utc(now) - timedelta(hours=SLA_THRESHOLD_HOURS)


async def compute_general_metrics(
    sources: DataSources,
    window: TimeWindow | None = None,
    site_id: UUID | None = None,
    now: datetime | None = None,
) -> DashboardMetrics:
    """Aggregate case, satisfaction, follow-up and SLA metrics for a scope.

    ``window`` filters on case creation time; None means all time.
    """
    now = ensure_utc(now) if now else utc_now()
    cases, surveys, follow_ups = sources.cases, sources.surveys, sources.follow_ups
    scope = {"window": window, "site_id": site_id}

    logger.debug(
        "Computing dashboard metrics",
        extra=build_log_context(
            operation="compute_general_metrics",
            site_id=str(site_id) if site_id else None,
            window_start=window.start if window else None,
            window_end=window.end if window else None,
        ),
    )

    (
        open_cases,
        closed_cases,
        total_cases,
        state_counts,
        total_surveys,
        completed_surveys,
        scores,
        durations,
        active_follow_ups,
        completed_follow_ups,
        timed_out_closures,
        sla_breached_cases,
    ) = await gather(
        partial(cases.count_cases, states=OPEN_CASE_STATES, **scope),
        partial(cases.count_cases, states=CLOSED_CASE_STATES, **scope),
        partial(cases.count_cases, **scope),
        partial(cases.count_by_state, **scope),
        partial(surveys.count_surveys, **scope),
        partial(surveys.count_surveys, completed_only=True, **scope),
        partial(surveys.completed_scores, **scope),
        partial(cases.closed_case_durations, **scope),
        partial(follow_ups.count_follow_ups, active=True, **scope),
        partial(follow_ups.count_follow_ups, active=False, **scope),
        partial(
            follow_ups.count_follow_ups,
            active=False,
            outcome=FollowUpOutcome.CLOSED_WITHOUT_RESPONSE,
            **scope,
        ),
        partial(cases.count_sla_breached, cutoff=sla_cutoff(now), **scope),
    )

    sla_within_cases = total_cases - sla_breached_cases

    return DashboardMetrics(
        open_cases=open_cases,
        closed_cases=closed_cases,
        total_cases=total_cases,
        cases_by_state=StateBreakdown.from_counts(state_counts),
        satisfaction_score=round2(mean(scores)),
        total_surveys=total_surveys,
        completed_surveys=completed_surveys,
        response_rate_pct=round2(percentage(completed_surveys, total_surveys)),
        avg_resolution_hours=round2(mean_resolution_hours(durations)),
        avg_first_response_minutes=PLACEHOLDER_FIRST_RESPONSE_MINUTES,
        first_contact_resolutions=closed_cases * PLACEHOLDER_FIRST_CONTACT_PERCENT // 100,
        active_follow_ups=active_follow_ups,
        completed_follow_ups=completed_follow_ups,
        timed_out_closures=timed_out_closures,
        sla_within_cases=sla_within_cases,
        sla_breached_cases=sla_breached_cases,
        # No cases in scope counts as full compliance
        sla_compliance_pct=round2(percentage(sla_within_cases, total_cases, empty=100.0)),
    )


async def compute_overview(
    sources: DataSources,
    site_id: UUID | None = None,
    now: datetime | None = None,
) -> MetricsOverview:
    """Metrics for today, the current calendar month (UTC) and all time."""
    now = ensure_utc(now) if now else utc_now()
    today_start, today_end = day_bounds(now.date())
    month_start, month_end = month_bounds(now.date())

    today, this_month, all_time = await gather_async(
        compute_general_metrics(
            sources, TimeWindow(start=today_start, end=today_end), site_id, now=now
        ),
        compute_general_metrics(
            sources, TimeWindow(start=month_start, end=month_end), site_id, now=now
        ),
        compute_general_metrics(sources, None, site_id, now=now),
    )
    return MetricsOverview(today=today, this_month=this_month, all_time=all_time)
