"""Bundle of the five stores handed to every service function."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.orm import Session, sessionmaker

from deskmetrics.stores.case_store import CaseStore
from deskmetrics.stores.conversation_store import ConversationStore
from deskmetrics.stores.followup_store import FollowUpStore
from deskmetrics.stores.message_store import MessageStore
from deskmetrics.stores.protocols import (
    CaseStoreProtocol,
    ConversationStoreProtocol,
    FollowUpStoreProtocol,
    MessageStoreProtocol,
    SurveyStoreProtocol,
)
from deskmetrics.stores.survey_store import SurveyStore


@dataclass(frozen=True)
class DataSources:
    """Read-only handles on the relational and conversation stores."""

    cases: CaseStoreProtocol
    surveys: SurveyStoreProtocol
    follow_ups: FollowUpStoreProtocol
    conversations: ConversationStoreProtocol
    messages: MessageStoreProtocol

    @classmethod
    def from_session_factories(
        cls,
        relational: sessionmaker[Session],
        conversational: sessionmaker[Session],
    ) -> "DataSources":
        return cls(
            cases=CaseStore(relational),
            surveys=SurveyStore(relational),
            follow_ups=FollowUpStore(relational),
            conversations=ConversationStore(conversational),
            messages=MessageStore(conversational),
        )


@lru_cache
def get_data_sources() -> DataSources:
    """Stores bound to the configured databases (one instance per process)."""
    from deskmetrics.db.session import ConversationSessionLocal, SessionLocal

    return DataSources.from_session_factories(SessionLocal, ConversationSessionLocal)
