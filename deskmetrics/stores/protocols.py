"""Store Protocols: the read shapes the services depend on.

The SQLAlchemy adapters in this package implement them; tests or other
backends can supply any object with the same methods. Methods are
synchronous and each call is independent, so services may run several on
worker threads at once.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from deskmetrics.db.enums import CaseState, FollowUpOutcome
from deskmetrics.db.models import Assignee, Case, Conversation, Message, SatisfactionSurvey, Site
from deskmetrics.schemas.filters import CaseFilters, ConversationFilters, TimeWindow


class CaseStoreProtocol(Protocol):
    def count_cases(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        assignee_id: UUID | None = None,
        states: tuple[CaseState, ...] | None = None,
    ) -> int: ...
    def count_by_state(
        self, *, window: TimeWindow | None = None, site_id: UUID | None = None,
    ) -> dict[CaseState, int]: ...
    def count_sla_breached(
        self, *, cutoff: datetime, window: TimeWindow | None = None, site_id: UUID | None = None,
    ) -> int: ...
    def closed_case_durations(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        assignee_id: UUID | None = None,
    ) -> list[tuple[datetime, datetime]]: ...
    def list_cases(self, filters: CaseFilters, offset: int, limit: int) -> list[Case]: ...
    def count_filtered(self, filters: CaseFilters) -> int: ...
    def group_by_site(
        self, *, window: TimeWindow, site_id: UUID | None = None,
    ) -> list[tuple[UUID, int]]: ...
    def group_by_assignee(
        self, *, window: TimeWindow, site_id: UUID | None = None,
    ) -> list[tuple[UUID, int]]: ...
    def top_categories(
        self, *, window: TimeWindow, site_id: UUID | None = None, limit: int,
    ) -> list[tuple[str, int]]: ...
    def get_site(self, site_id: UUID) -> Site | None: ...
    def get_assignee(self, assignee_id: UUID) -> Assignee | None: ...


class SurveyStoreProtocol(Protocol):
    def count_surveys(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        completed_only: bool = False,
    ) -> int: ...
    def completed_scores(
        self,
        *,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
        assignee_id: UUID | None = None,
    ) -> list[float]: ...
    def completed_surveys(
        self, *, responded_window: TimeWindow | None = None, site_id: UUID | None = None,
    ) -> list[SatisfactionSurvey]: ...


class FollowUpStoreProtocol(Protocol):
    def count_follow_ups(
        self,
        *,
        active: bool,
        outcome: FollowUpOutcome | None = None,
        window: TimeWindow | None = None,
        site_id: UUID | None = None,
    ) -> int: ...


class ConversationStoreProtocol(Protocol):
    def list_conversations(
        self, filters: ConversationFilters, offset: int, limit: int,
    ) -> list[Conversation]: ...
    def count_conversations(self, filters: ConversationFilters) -> int: ...
    def get_by_phone(self, phone: str) -> Conversation | None: ...


class MessageStoreProtocol(Protocol):
    def recent_messages(self, phone: str, limit: int) -> list[Message]: ...
    def all_messages(self, phone: str) -> list[Message]: ...
