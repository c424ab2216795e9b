"""Conversation queries over the conversation store."""

from __future__ import annotations

from sqlalchemy import func, select

from deskmetrics.db.models import Conversation
from deskmetrics.schemas.filters import ConversationFilters
from deskmetrics.stores.base import SqlStore


def _filter_conditions(filters: ConversationFilters) -> list:
    conditions = []
    if filters.phone:
        conditions.append(Conversation.phone == filters.phone)
    if filters.window is not None:
        conditions.append(Conversation.last_activity_at >= filters.window.start)
        conditions.append(Conversation.last_activity_at < filters.window.end)
    return conditions


class ConversationStore(SqlStore):
    name = "conversations"

    def list_conversations(
        self,
        filters: ConversationFilters,
        offset: int,
        limit: int,
    ) -> list[Conversation]:
        """Page of conversations, most recent activity first."""
        stmt = (
            select(Conversation)
            .where(*_filter_conditions(filters))
            .order_by(Conversation.last_activity_at.desc(), Conversation.phone)
            .offset(offset)
            .limit(limit)
        )
        with self._session("list_conversations") as db:
            return list(db.scalars(stmt).all())

    def count_conversations(self, filters: ConversationFilters) -> int:
        stmt = select(func.count(Conversation.id)).where(*_filter_conditions(filters))
        with self._session("count_conversations") as db:
            return db.scalar(stmt) or 0

    def get_by_phone(self, phone: str) -> Conversation | None:
        stmt = select(Conversation).where(Conversation.phone == phone)
        with self._session("get_by_phone") as db:
            return db.scalars(stmt).first()
