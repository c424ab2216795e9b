"""Conversation history schemas."""

from datetime import datetime

from pydantic import BaseModel

from deskmetrics.db.enums import ConversationStage, ConversationState, MessageDirection, MessageSender


class MessageView(BaseModel):
    id: str
    content: str
    direction: MessageDirection
    sender: MessageSender
    sent_at: datetime
    read: bool


class ConversationView(BaseModel):
    """A conversation summary with its (possibly bounded) message history."""

    id: str
    phone: str
    contact_name: str
    state: ConversationState
    stage: ConversationStage
    requires_human: bool
    escalation_reason: str | None = None
    last_message: str
    last_message_at: datetime
    total_messages: int
    messages: list[MessageView]
