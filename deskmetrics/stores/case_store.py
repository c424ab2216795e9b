"""Case queries over the relational store."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from deskmetrics.db.enums import CaseState, OPEN_CASE_STATES
from deskmetrics.db.models import Assignee, Case, Site
from deskmetrics.schemas.filters import CaseFilters, TimeWindow
from deskmetrics.stores.base import SqlStore, case_scope


def _filter_conditions(filters: CaseFilters) -> list:
    conditions = case_scope(filters.window, filters.site_id, filters.assignee_id)
    if filters.state is not None:
        conditions.append(Case.state == filters.state)
    if filters.priority is not None:
        conditions.append(Case.priority == filters.priority)
    return conditions


class CaseStore(SqlStore):
    name = "cases"

    def count_cases(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        assignee_id: UUID | None = None,
        states: tuple[CaseState, ...] | None = None,
    ) -> int:
        """Count cases in scope, optionally restricted to a set of states."""
        conditions = case_scope(window, site_id, assignee_id)
        if states is not None:
            conditions.append(Case.state.in_(states))
        with self._session("count_cases") as db:
            return db.scalar(select(func.count(Case.id)).where(*conditions)) or 0

    def count_by_state(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
    ) -> dict[CaseState, int]:
        """Grouped count per state. States with no cases are absent."""
        stmt = (
            select(Case.state, func.count(Case.id))
            .where(*case_scope(window, site_id))
            .group_by(Case.state)
        )
        with self._session("count_by_state") as db:
            return {CaseState(state): count for state, count in db.execute(stmt).all()}

    def count_sla_breached(
        self,
        *,
        cutoff: datetime,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
    ) -> int:
        """Count open cases created before ``cutoff`` (now minus the SLA threshold)."""
        stmt = select(func.count(Case.id)).where(
            *case_scope(window, site_id),
            Case.state.in_(OPEN_CASE_STATES),
            Case.created_at < cutoff,
        )
        with self._session("count_sla_breached") as db:
            return db.scalar(stmt) or 0

    def closed_case_durations(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        assignee_id: UUID | None = None,
    ) -> list[tuple[datetime, datetime]]:
        """(created_at, closed_at) for closed cases that carry a closure timestamp."""
        stmt = select(Case.created_at, Case.closed_at).where(
            *case_scope(window, site_id, assignee_id),
            Case.state == CaseState.CLOSED,
            Case.closed_at.isnot(None),
        )
        with self._session("closed_case_durations") as db:
            return [(created, closed) for created, closed in db.execute(stmt).all()]

    def list_cases(self, filters: CaseFilters, offset: int, limit: int) -> list[Case]:
        """Page of cases, newest first, with site, reporter and assignee loaded."""
        stmt = (
            select(Case)
            .options(
                selectinload(Case.site),
                selectinload(Case.reporter),
                selectinload(Case.assignee),
            )
            .where(*_filter_conditions(filters))
            .order_by(Case.created_at.desc(), Case.case_number.desc())
            .offset(offset)
            .limit(limit)
        )
        with self._session("list_cases") as db:
            return list(db.scalars(stmt).all())

    def count_filtered(self, filters: CaseFilters) -> int:
        stmt = select(func.count(Case.id)).where(*_filter_conditions(filters))
        with self._session("count_filtered") as db:
            return db.scalar(stmt) or 0

    def group_by_site(
        self,
        *,
        window: TimeWindow,
        site_id: UUID | None = None,
    ) -> list[tuple[UUID, int]]:
        """Case count per site that has cases in the window."""
        stmt = (
            select(Case.site_id, func.count(Case.id))
            .where(*case_scope(window, site_id))
            .group_by(Case.site_id)
            .order_by(func.count(Case.id).desc(), Case.site_id)
        )
        with self._session("group_by_site") as db:
            return [(site, count) for site, count in db.execute(stmt).all()]

    def group_by_assignee(
        self,
        *,
        window: TimeWindow,
        site_id: UUID | None = None,
    ) -> list[tuple[UUID, int]]:
        """Case count per assignee; unassigned cases are left out."""
        stmt = (
            select(Case.assignee_id, func.count(Case.id))
            .where(*case_scope(window, site_id), Case.assignee_id.isnot(None))
            .group_by(Case.assignee_id)
            .order_by(func.count(Case.id).desc(), Case.assignee_id)
        )
        with self._session("group_by_assignee") as db:
            return [(assignee, count) for assignee, count in db.execute(stmt).all()]

    def top_categories(
        self,
        *,
        window: TimeWindow,
        site_id: UUID | None = None,
        limit: int,
    ) -> list[tuple[str, int]]:
        """Most frequent categories, count descending (ties by name)."""
        count = func.count(Case.id)
        stmt = (
            select(Case.category, count)
            .where(*case_scope(window, site_id))
            .group_by(Case.category)
            .order_by(count.desc(), Case.category)
            .limit(limit)
        )
        with self._session("top_categories") as db:
            return [(category, total) for category, total in db.execute(stmt).all()]

    def get_site(self, site_id: UUID) -> Site | None:
        with self._session("get_site") as db:
            return db.get(Site, site_id)

    def get_assignee(self, assignee_id: UUID) -> Assignee | None:
        with self._session("get_assignee") as db:
            return db.get(Assignee, assignee_id)
