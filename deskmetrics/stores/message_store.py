"""Message queries over the conversation store, keyed by phone."""

from __future__ import annotations

from sqlalchemy import select

from deskmetrics.db.models import Message
from deskmetrics.stores.base import SqlStore


class MessageStore(SqlStore):
    name = "messages"

    def recent_messages(self, phone: str, limit: int) -> list[Message]:
        """The ``limit`` newest messages for a phone, in chronological order."""
        stmt = (
            select(Message)
            .where(Message.phone == phone)
            .order_by(Message.sent_at.desc(), Message.id.desc())
            .limit(limit)
        )
        with self._session("recent_messages") as db:
            messages = list(db.scalars(stmt).all())
        messages.reverse()
        return messages

    def all_messages(self, phone: str) -> list[Message]:
        """Full history for a phone, oldest first."""
        stmt = (
            select(Message)
            .where(Message.phone == phone)
            .order_by(Message.sent_at, Message.id)
        )
        with self._session("all_messages") as db:
            return list(db.scalars(stmt).all())
