"""Tests for dashboard metrics aggregation."""

from datetime import datetime, timedelta, timezone

import pytest

from deskmetrics.core.errors import StoreError
from deskmetrics.db.base import Base
from deskmetrics.db.enums import CaseState, FollowUpOutcome
from deskmetrics.schemas.filters import TimeWindow
from deskmetrics.services import metrics_service
from deskmetrics.services.analytics_shared import percentage, round2

from .conftest import NOW


WINDOW = TimeWindow(start=NOW - timedelta(days=3), end=NOW + timedelta(hours=1))


@pytest.mark.asyncio
async def test_resolution_and_sla_for_mixed_cases(sources, make_case):
    """Two closed cases (2h, 4h) and one open case 50h old."""
    make_case(NOW - timedelta(hours=10), closed_after=timedelta(hours=2))
    make_case(NOW - timedelta(hours=20), closed_after=timedelta(hours=4))
    make_case(NOW - timedelta(hours=50), state=CaseState.IN_PROGRESS)

    metrics = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert metrics.total_cases == 3
    assert metrics.open_cases == 1
    assert metrics.closed_cases == 2
    assert metrics.avg_resolution_hours == 3.0
    assert metrics.sla_breached_cases == 1
    assert metrics.sla_within_cases == 2
    assert metrics.sla_compliance_pct == 66.67


@pytest.mark.asyncio
async def test_empty_scope_reports_full_compliance(sources):
    metrics = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert metrics.total_cases == 0
    assert metrics.sla_compliance_pct == 100.0
    assert metrics.satisfaction_score == 0
    assert metrics.response_rate_pct == 0
    assert metrics.avg_resolution_hours == 0
    assert metrics.first_contact_resolutions == 0
    assert metrics.cases_by_state.total == 0


@pytest.mark.asyncio
async def test_state_breakdown_is_zero_filled_and_partitions_total(sources, make_case):
    make_case(NOW - timedelta(hours=1), state=CaseState.NEW)
    make_case(NOW - timedelta(hours=2), state=CaseState.NEW)
    make_case(NOW - timedelta(hours=3), state=CaseState.AWAITING_PARTS)
    make_case(NOW - timedelta(hours=4), closed_after=timedelta(hours=1))

    metrics = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)
    states = metrics.cases_by_state

    assert states.new == 2
    assert states.awaiting_parts == 1
    assert states.closed == 1
    assert states.assigned == 0
    assert states.in_progress == 0
    assert states.on_visit == 0
    assert states.total == metrics.total_cases
    assert metrics.open_cases + metrics.closed_cases == metrics.total_cases


@pytest.mark.asyncio
async def test_window_is_half_open(sources, make_case):
    window = TimeWindow(start=NOW - timedelta(days=1), end=NOW)
    make_case(window.start)
    make_case(window.end)
    make_case(window.end - timedelta(microseconds=1))

    metrics = await metrics_service.compute_general_metrics(sources, window, now=NOW)

    assert metrics.total_cases == 2


@pytest.mark.asyncio
async def test_no_window_counts_all_time(sources, make_case):
    make_case(datetime(2020, 1, 1, tzinfo=timezone.utc), closed_after=timedelta(hours=1))
    make_case(NOW - timedelta(hours=1))

    metrics = await metrics_service.compute_general_metrics(sources, None, now=NOW)

    assert metrics.total_cases == 2


@pytest.mark.asyncio
async def test_satisfaction_score_and_response_rate(sources, make_case, make_survey):
    first = make_case(NOW - timedelta(hours=30), closed_after=timedelta(hours=1))
    second = make_case(NOW - timedelta(hours=20), closed_after=timedelta(hours=1))
    third = make_case(NOW - timedelta(hours=10), closed_after=timedelta(hours=1))
    make_survey(first, "4.00")
    make_survey(second, "5.00")
    make_survey(third)  # pending

    metrics = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert metrics.satisfaction_score == 4.5
    assert metrics.total_surveys == 3
    assert metrics.completed_surveys == 2
    assert metrics.response_rate_pct == 66.67


@pytest.mark.asyncio
async def test_site_filter_scopes_every_figure(sources, make_site, make_case, make_survey):
    north = make_site("North")
    south = make_site("South")
    kept = make_case(NOW - timedelta(hours=60), site=north)
    other = make_case(NOW - timedelta(hours=5), site=south, closed_after=timedelta(hours=1))
    make_survey(kept, "2.00")
    make_survey(other, "5.00")

    metrics = await metrics_service.compute_general_metrics(
        sources, WINDOW, site_id=north.id, now=NOW
    )

    assert metrics.total_cases == 1
    assert metrics.closed_cases == 0
    assert metrics.satisfaction_score == 2.0
    assert metrics.sla_breached_cases == 1
    assert metrics.sla_compliance_pct == 0.0


@pytest.mark.asyncio
async def test_closed_cases_never_breach(sources, make_case):
    make_case(NOW - timedelta(hours=100), closed_after=timedelta(hours=90))

    metrics = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert metrics.sla_breached_cases == 0
    assert metrics.sla_compliance_pct == 100.0


@pytest.mark.asyncio
async def test_placeholder_figures(sources, make_case):
    for hours in range(1, 8):
        make_case(NOW - timedelta(hours=hours), closed_after=timedelta(minutes=30))

    metrics = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert metrics.closed_cases == 7
    assert metrics.first_contact_resolutions == 1
    assert metrics.avg_first_response_minutes == 15


@pytest.mark.asyncio
async def test_follow_up_counts(sources, make_case, make_follow_up):
    case = make_case(NOW - timedelta(hours=5))
    make_follow_up(case, active=True)
    make_follow_up(case, active=False, outcome=FollowUpOutcome.CONFIRMED_RESOLVED)
    make_follow_up(case, active=False, outcome=FollowUpOutcome.CLOSED_WITHOUT_RESPONSE)
    make_follow_up(case, active=False, outcome=FollowUpOutcome.CLOSED_WITHOUT_RESPONSE)

    metrics = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert metrics.active_follow_ups == 1
    assert metrics.completed_follow_ups == 3
    assert metrics.timed_out_closures == 2


@pytest.mark.asyncio
async def test_repeated_calls_return_identical_metrics(sources, make_case, make_survey):
    case = make_case(NOW - timedelta(hours=70), closed_after=timedelta(hours=3))
    make_survey(case, "3.75")
    make_case(NOW - timedelta(hours=49))

    first = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)
    second = await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert first == second


@pytest.mark.asyncio
async def test_overview_uses_day_month_and_all_time_windows(sources, make_case):
    make_case(NOW - timedelta(hours=2))  # today
    make_case(datetime(2024, 6, 1, 0, 0, tzinfo=timezone.utc))  # earlier this month
    make_case(datetime(2024, 5, 31, 23, 59, tzinfo=timezone.utc))  # last month
    make_case(datetime(2023, 6, 15, 10, 0, tzinfo=timezone.utc))

    overview = await metrics_service.compute_overview(sources, now=NOW)

    assert overview.today.total_cases == 1
    assert overview.this_month.total_cases == 2
    assert overview.all_time.total_cases == 4


@pytest.mark.asyncio
async def test_store_failure_fails_the_whole_call(sources, relational_factory):
    Base.metadata.drop_all(relational_factory.kw["bind"])

    with pytest.raises(StoreError) as exc_info:
        await metrics_service.compute_general_metrics(sources, WINDOW, now=NOW)

    assert exc_info.value.__cause__ is not None


def test_sla_cutoff_is_48_hours_before_now():
    assert metrics_service.sla_cutoff(NOW) == NOW - timedelta(hours=48)


def test_rounding_is_half_up():
    assert round2(percentage(2, 3)) == 66.67
    assert round2(0.125) == 0.13
    assert round2(2.675) == 2.68


@pytest.mark.asyncio
async def test_offset_window_bounds_match_the_same_instants(sources, make_case):
    make_case(NOW - timedelta(hours=1))
    plus_five = timezone(timedelta(hours=5))
    window = TimeWindow(
        start=(NOW - timedelta(hours=2)).astimezone(plus_five),
        end=NOW.astimezone(plus_five),
    )

    metrics = await metrics_service.compute_general_metrics(sources, window, now=NOW)

    assert window.start.tzinfo == timezone.utc
    assert metrics.total_cases == 1


def test_reversed_window_is_rejected():
    with pytest.raises(ValueError):
        TimeWindow(start=NOW, end=NOW - timedelta(days=1))
