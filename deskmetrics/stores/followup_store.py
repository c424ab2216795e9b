"""Follow-up queries, scoped through the follow-up's case."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select

from deskmetrics.db.enums import FollowUpOutcome
from deskmetrics.db.models import Case, FollowUp
from deskmetrics.schemas.filters import TimeWindow
from deskmetrics.stores.base import SqlStore, case_scope


class FollowUpStore(SqlStore):
    name = "follow_ups"

    def count_follow_ups(
        self,
        *,
        active: bool,
        outcome: FollowUpOutcome | None = None,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
    ) -> int:
        stmt = (
            select(func.count(FollowUp.id))
            .join(Case, FollowUp.case_id == Case.id)
            .where(*case_scope(window, site_id), FollowUp.active.is_(active))
        )
        if outcome is not None:
            stmt = stmt.where(FollowUp.outcome == outcome)
        with self._session("count_follow_ups") as db:
            return db.scalar(stmt) or 0
