"""Enum definitions for application constants."""

from deskmetrics.db.enums.cases import (
    CLOSED_CASE_STATES,
    OPEN_CASE_STATES,
    CasePriority,
    CaseState,
    FollowUpOutcome,
    SurveyState,
)
from deskmetrics.db.enums.conversations import (
    ConversationStage,
    ConversationState,
    DeliveryState,
    MessageDirection,
    MessageSender,
)

__all__ = [
    "CLOSED_CASE_STATES",
    "OPEN_CASE_STATES",
    "CasePriority",
    "CaseState",
    "ConversationStage",
    "ConversationState",
    "DeliveryState",
    "FollowUpOutcome",
    "MessageDirection",
    "MessageSender",
    "SurveyState",
]
