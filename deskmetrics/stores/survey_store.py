"""Satisfaction survey queries. Surveys are scoped through their case."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select

from deskmetrics.db.enums import SurveyState
from deskmetrics.db.models import Case, SatisfactionSurvey
from deskmetrics.schemas.filters import TimeWindow
from deskmetrics.stores.base import SqlStore, case_scope


class SurveyStore(SqlStore):
    name = "surveys"

    def count_surveys(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        completed_only: bool = False,
    ) -> int:
        """Count surveys whose case falls in the creation window / site."""
        stmt = (
            select(func.count(SatisfactionSurvey.id))
            .join(Case, SatisfactionSurvey.case_id == Case.id)
            .where(*case_scope(window, site_id))
        )
        if completed_only:
            stmt = stmt.where(SatisfactionSurvey.state == SurveyState.COMPLETED)
        with self._session("count_surveys") as db:
            return db.scalar(stmt) or 0

    def completed_scores(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        assignee_id: UUID | None = None,
    ) -> list[float]:
        """Overall averages of completed surveys, scoped by their case.

        A completed survey without an overall average counts as 0.
        """
        stmt = (
            select(SatisfactionSurvey.overall_average)
            .join(Case, SatisfactionSurvey.case_id == Case.id)
            .where(
                *case_scope(window, site_id, assignee_id),
                SatisfactionSurvey.state == SurveyState.COMPLETED,
            )
        )
        with self._session("completed_scores") as db:
            return [float(score or 0) for score in db.scalars(stmt).all()]

    def completed_surveys(
        self,
        *,
        responded_window: TimeWindow | None = None,
        site_id: UUID | None = None,
    ) -> list[SatisfactionSurvey]:
        """Completed surveys by response time [start, end), oldest response first."""
        stmt = select(SatisfactionSurvey).where(
            SatisfactionSurvey.state == SurveyState.COMPLETED
        )
        if responded_window is not None:
            stmt = stmt.where(
                SatisfactionSurvey.responded_at >= responded_window.start,
                SatisfactionSurvey.responded_at < responded_window.end,
            )
        if site_id is not None:
            stmt = stmt.join(Case, SatisfactionSurvey.case_id == Case.id).where(
                Case.site_id == site_id
            )
        stmt = stmt.order_by(SatisfactionSurvey.responded_at, SatisfactionSurvey.id)
        with self._session("completed_surveys") as db:
            return list(db.scalars(stmt).all())
