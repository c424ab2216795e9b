"""
Conversation history service.

Joins conversation summaries from the conversation store with their
messages (same store, keyed by phone). List views carry at most the
CONVERSATION_MESSAGE_CAP newest messages per conversation so a page costs a
bounded amount of work; the single-conversation view carries everything.
"""

from __future__ import annotations

from functools import partial

from deskmetrics.core.async_utils import gather
from deskmetrics.core.constants import (
    CONVERSATION_MESSAGE_CAP,
    DEFAULT_CONVERSATION_PAGE_SIZE,
    LAST_MESSAGE_PREVIEW_CHARS,
    MAX_CONVERSATION_PAGE_SIZE,
)
from deskmetrics.core.errors import NotFoundError
from deskmetrics.db.enums import DeliveryState
from deskmetrics.db.models import Conversation, Message
from deskmetrics.schemas.conversations import ConversationView, MessageView
from deskmetrics.schemas.filters import ConversationFilters
from deskmetrics.stores.sources import DataSources
from deskmetrics.utils.datetime_parsing import ensure_utc
from deskmetrics.utils.pagination import PaginatedResponse, PaginationParams, get_pagination


def to_message_view(message: Message) -> MessageView:
    return MessageView(
        id=message.id,
        content=message.content,
        direction=message.direction,
        sender=message.sender,
        sent_at=ensure_utc(message.sent_at),
        read=message.delivery_state == DeliveryState.READ,
    )


def to_conversation_view(
    conversation: Conversation,
    messages: list[Message],
    *,
    preview_chars: int | None = None,
) -> ConversationView:
    """``messages`` must be chronological; the last one is the newest."""
    last_message = messages[-1].content if messages else ""
    if preview_chars is not None:
        last_message = last_message[:preview_chars]

    return ConversationView(
        id=conversation.id,
        phone=conversation.phone,
        contact_name=conversation.contact_name or conversation.phone,
        state=conversation.state,
        stage=conversation.stage,
        requires_human=conversation.requires_human,
        escalation_reason=conversation.escalation_reason,
        last_message=last_message,
        last_message_at=ensure_utc(conversation.last_activity_at),
        total_messages=len(messages),
        messages=[to_message_view(message) for message in messages],
    )


async def list_conversations(
    sources: DataSources,
    filters: ConversationFilters | None = None,
    pagination: PaginationParams | None = None,
) -> PaginatedResponse[ConversationView]:
    """Page of conversations by most recent activity, each with bounded history."""
    filters = filters or ConversationFilters()
    pagination = pagination or get_pagination(
        None,
        None,
        default_per_page=DEFAULT_CONVERSATION_PAGE_SIZE,
        max_per_page=MAX_CONVERSATION_PAGE_SIZE,
    )

    conversations, total = await gather(
        partial(
            sources.conversations.list_conversations,
            filters,
            pagination.offset,
            pagination.per_page,
        ),
        partial(sources.conversations.count_conversations, filters),
    )

    histories = await gather(
        *(
            partial(sources.messages.recent_messages, conversation.phone, CONVERSATION_MESSAGE_CAP)
            for conversation in conversations
        )
    )

    items = [
        to_conversation_view(conversation, messages, preview_chars=LAST_MESSAGE_PREVIEW_CHARS)
        for conversation, messages in zip(conversations, histories)
    ]
    return PaginatedResponse[ConversationView].create(items, total, pagination)


async def get_conversation(sources: DataSources, phone: str) -> ConversationView:
    """Conversation for a phone with its full message history."""
    conversation, messages = await gather(
        partial(sources.conversations.get_by_phone, phone),
        partial(sources.messages.all_messages, phone),
    )
    if conversation is None:
        raise NotFoundError(f"No conversation for phone {phone}")
    return to_conversation_view(conversation, messages)
