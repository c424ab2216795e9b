"""
Test configuration and fixtures.

Provides:
- Fresh SQLite databases per test for the relational and conversation stores
- Sessions for seeding rows (committed, so store calls on worker threads see them)
- DataSources bound to both databases
- Row factories for sites, assignees, cases, surveys, follow-ups, conversations, messages
"""
import itertools
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from deskmetrics.db.base import Base, ConversationBase
from deskmetrics.db.enums import (
    CasePriority,
    CaseState,
    ConversationStage,
    ConversationState,
    DeliveryState,
    MessageDirection,
    MessageSender,
    SurveyState,
)
from deskmetrics.db.models import (
    Assignee,
    Case,
    Conversation,
    FollowUp,
    Message,
    Reporter,
    SatisfactionSurvey,
    Site,
)
from deskmetrics.db.session import create_session_factory, create_store_engine
from deskmetrics.stores.sources import DataSources


# Fixed "current time" for SLA and window arithmetic
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def relational_factory(tmp_path):
    engine = create_store_engine(f"sqlite:///{tmp_path / 'cases.db'}")
    Base.metadata.create_all(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def conversation_factory(tmp_path):
    engine = create_store_engine(f"sqlite:///{tmp_path / 'conversations.db'}")
    ConversationBase.metadata.create_all(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(relational_factory) -> Generator[Session, None, None]:
    """Relational store session used to seed rows."""
    session = relational_factory(expire_on_commit=False)
    yield session
    session.close()


@pytest.fixture(scope="function")
def conversation_db(conversation_factory) -> Generator[Session, None, None]:
    """Conversation store session used to seed rows."""
    session = conversation_factory(expire_on_commit=False)
    yield session
    session.close()


@pytest.fixture(scope="function")
def sources(relational_factory, conversation_factory) -> DataSources:
    return DataSources.from_session_factories(relational_factory, conversation_factory)


# =============================================================================
# Row Factories
# =============================================================================

@pytest.fixture(scope="function")
def test_site(db: Session) -> Site:
    site = Site(id=uuid.uuid4(), name="Torre Norte")
    db.add(site)
    db.commit()
    return site


@pytest.fixture(scope="function")
def test_reporter(db: Session) -> Reporter:
    reporter = Reporter(id=uuid.uuid4(), full_name="Carmen Díaz", phone="+5215550002222")
    db.add(reporter)
    db.commit()
    return reporter


@pytest.fixture(scope="function")
def make_site(db: Session):
    def _make(name: str) -> Site:
        site = Site(id=uuid.uuid4(), name=name)
        db.add(site)
        db.commit()
        return site

    return _make


@pytest.fixture(scope="function")
def make_assignee(db: Session):
    def _make(full_name: str, email: str | None = None) -> Assignee:
        assignee = Assignee(id=uuid.uuid4(), full_name=full_name, email=email)
        db.add(assignee)
        db.commit()
        return assignee

    return _make


@pytest.fixture(scope="function")
def make_case(db: Session, test_site: Site, test_reporter: Reporter):
    """Create a case; ``closed_after`` sets state=closed and closed_at=created+delta."""
    numbers = itertools.count(1)

    def _make(
        created_at: datetime,
        *,
        state: CaseState = CaseState.NEW,
        closed_after: timedelta | None = None,
        site: Site | None = None,
        assignee: Assignee | None = None,
        category: str = "plumbing",
        priority: CasePriority = CasePriority.MEDIUM,
        sla_breached: bool = False,
        satisfaction_score: Decimal | None = None,
    ) -> Case:
        closed_at = None
        if closed_after is not None:
            state = CaseState.CLOSED
            closed_at = created_at + closed_after
        case = Case(
            id=uuid.uuid4(),
            case_number=f"CASE-{next(numbers):05d}",
            site_id=(site or test_site).id,
            reporter_id=test_reporter.id,
            assignee_id=assignee.id if assignee else None,
            category=category,
            description="Leak under the kitchen sink",
            unit="4B",
            state=state,
            priority=priority,
            created_at=created_at,
            closed_at=closed_at,
            sla_breached=sla_breached,
            satisfaction_score=satisfaction_score,
        )
        db.add(case)
        db.commit()
        return case

    return _make


@pytest.fixture(scope="function")
def make_survey(db: Session):
    def _make(
        case: Case,
        overall: str | None = None,
        *,
        comment: str | None = None,
        responded_at: datetime | None = None,
        attitude: int | None = None,
        speed: int | None = None,
        quality: int | None = None,
    ) -> SatisfactionSurvey:
        completed = overall is not None
        survey = SatisfactionSurvey(
            id=uuid.uuid4(),
            case_id=case.id,
            state=SurveyState.COMPLETED if completed else SurveyState.PENDING,
            technician_attitude=attitude,
            repair_speed=speed,
            service_quality=quality,
            overall_average=Decimal(overall) if completed else None,
            comment=comment,
            responded_at=(responded_at or NOW) if completed else None,
        )
        db.add(survey)
        db.commit()
        return survey

    return _make


@pytest.fixture(scope="function")
def make_follow_up(db: Session):
    def _make(case: Case, *, active: bool = True, outcome=None) -> FollowUp:
        follow_up = FollowUp(id=uuid.uuid4(), case_id=case.id, active=active, outcome=outcome)
        db.add(follow_up)
        db.commit()
        return follow_up

    return _make


@pytest.fixture(scope="function")
def make_conversation(conversation_db: Session):
    def _make(
        phone: str,
        last_activity_at: datetime = NOW,
        *,
        contact_name: str | None = None,
        state: ConversationState = ConversationState.ACTIVE,
        stage: ConversationStage = ConversationStage.INITIAL,
        requires_human: bool = False,
        escalation_reason: str | None = None,
    ) -> Conversation:
        conversation = Conversation(
            phone=phone,
            contact_name=contact_name,
            state=state,
            stage=stage,
            requires_human=requires_human,
            escalation_reason=escalation_reason,
            last_activity_at=last_activity_at,
        )
        conversation_db.add(conversation)
        conversation_db.commit()
        return conversation

    return _make


@pytest.fixture(scope="function")
def make_messages(conversation_db: Session):
    """Add messages one minute apart, oldest first, ending at ``end``."""

    def _make(
        phone: str,
        contents: list[str],
        *,
        end: datetime = NOW,
        delivery_state: DeliveryState = DeliveryState.DELIVERED,
    ) -> list[Message]:
        start = end - timedelta(minutes=len(contents) - 1)
        messages = [
            Message(
                phone=phone,
                direction=MessageDirection.INBOUND if i % 2 == 0 else MessageDirection.OUTBOUND,
                sender=MessageSender.HUMAN if i % 2 == 0 else MessageSender.BOT,
                content=content,
                delivery_state=delivery_state,
                sent_at=start + timedelta(minutes=i),
            )
            for i, content in enumerate(contents)
        ]
        conversation_db.add_all(messages)
        conversation_db.commit()
        return messages

    return _make
