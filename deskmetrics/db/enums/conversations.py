"""Conversation and message enums."""

from enum import Enum


class ConversationState(str, Enum):
    """Conversation handling state."""

    ACTIVE = "active"
    AWAITING_USER = "awaiting_user"
    AWAITING_TECHNICIAN = "awaiting_technician"
    CLOSED = "closed"


class ConversationStage(str, Enum):
    """Where the intake flow is for a conversation."""

    INITIAL = "initial"
    GATHERING_INFO = "gathering_info"
    PROCESSING = "processing"
    FOLLOWING_UP = "following_up"
    COMPLETED = "completed"


class MessageDirection(str, Enum):
    """Canonical message direction."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


class MessageSender(str, Enum):
    """Who produced a message."""

    BOT = "bot"
    HUMAN = "human"
    SYSTEM = "system"


class DeliveryState(str, Enum):
    """Delivery state reported by the messaging provider."""

    SENDING = "sending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"
