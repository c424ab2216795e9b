"""Conversation store models. Phone number joins conversations to messages."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from deskmetrics.db.base import ConversationBase
from deskmetrics.db.enums import (
    ConversationStage,
    ConversationState,
    DeliveryState,
    MessageDirection,
    MessageSender,
)
from deskmetrics.db.models._types import enum_type


def _document_id() -> str:
    return uuid.uuid4().hex


class Conversation(ConversationBase):
    """Per-phone messaging thread."""

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_document_id)
    phone: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    state: Mapped[ConversationState] = mapped_column(
        enum_type(ConversationState, name="conversation_state"), nullable=False
    )
    stage: Mapped[ConversationStage] = mapped_column(
        enum_type(ConversationStage, name="conversation_stage"), nullable=False
    )
    requires_human: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    escalation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_activity_at: Mapped[datetime] = mapped_column(nullable=False, index=True)


class Message(ConversationBase):
    """A single inbound or outbound message."""

    __tablename__ = "messages"
    __table_args__ = (Index("idx_messages_phone_sent", "phone", "sent_at"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_document_id)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    direction: Mapped[MessageDirection] = mapped_column(
        enum_type(MessageDirection, name="message_direction"), nullable=False
    )
    sender: Mapped[MessageSender] = mapped_column(
        enum_type(MessageSender, name="message_sender"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    delivery_state: Mapped[DeliveryState] = mapped_column(
        enum_type(DeliveryState, name="delivery_state"), nullable=False
    )
    sent_at: Mapped[datetime] = mapped_column(nullable=False)
