"""Satisfaction survey statistics."""

from __future__ import annotations

from functools import partial
from uuid import UUID

from deskmetrics.core.async_utils import gather
from deskmetrics.core.constants import HIGHLIGHTED_COMMENTS_LIMIT
from deskmetrics.db.models import SatisfactionSurvey
from deskmetrics.schemas.filters import TimeWindow
from deskmetrics.schemas.satisfaction import (
    DimensionAverages,
    HighlightedComment,
    SatisfactionSummary,
    ScoreDistribution,
)
from deskmetrics.services.analytics_shared import mean, round2
from deskmetrics.stores.sources import DataSources
from deskmetrics.utils.datetime_parsing import ensure_utc

# Lower bound (inclusive) of each tier, best first. Anything below is "poor".
SCORE_TIERS: list[tuple[float, str]] = [
    (4.5, "excellent"),
    (3.5, "very_good"),
    (2.5, "good"),
    (1.5, "fair"),
]


def score_tier(score: float) -> str:
    for lower_bound, tier in SCORE_TIERS:
        if score >= lower_bound:
            return tier
    return "poor"


def _overall(survey: SatisfactionSurvey) -> float:
    return float(survey.overall_average or 0)


def summarize_surveys(surveys: list[SatisfactionSurvey]) -> SatisfactionSummary:
    """Build the summary from completed surveys, in the order given."""
    if not surveys:
        return SatisfactionSummary()

    averages = DimensionAverages(
        technician_attitude=round2(mean(s.technician_attitude or 0 for s in surveys)),
        repair_speed=round2(mean(s.repair_speed or 0 for s in surveys)),
        service_quality=round2(mean(s.service_quality or 0 for s in surveys)),
        overall=round2(mean(_overall(s) for s in surveys)),
    )

    tiers = {tier: 0 for tier in ScoreDistribution.model_fields}
    for survey in surveys:
        tiers[score_tier(_overall(survey))] += 1

    # First N with a comment, not the best-scored N
    highlighted = [
        HighlightedComment(
            comment=survey.comment,
            score=_overall(survey),
            responded_at=ensure_utc(survey.responded_at) if survey.responded_at else None,
        )
        for survey in surveys
        if survey.comment
    ][:HIGHLIGHTED_COMMENTS_LIMIT]

    return SatisfactionSummary(
        total=len(surveys),
        averages=averages,
        distribution=ScoreDistribution(**tiers),
        highlighted_comments=highlighted,
    )


async def compute_satisfaction(
    sources: DataSources,
    window: TimeWindow | None = None,
    site_id: UUID | None = None,
) -> SatisfactionSummary:
    """Survey statistics; ``window`` filters on the survey response time."""
    (surveys,) = await gather(
        partial(sources.surveys.completed_surveys, responded_window=window, site_id=site_id)
    )
    return summarize_surveys(surveys)
