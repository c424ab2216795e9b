"""SQLAlchemy ORM models for both stores."""

from deskmetrics.db.models.cases import (
    Assignee,
    Case,
    FollowUp,
    Reporter,
    SatisfactionSurvey,
    Site,
)
from deskmetrics.db.models.conversations import Conversation, Message

__all__ = [
    "Assignee",
    "Case",
    "Conversation",
    "FollowUp",
    "Message",
    "Reporter",
    "SatisfactionSurvey",
    "Site",
]
