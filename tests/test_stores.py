"""Tests for the SQLAlchemy store adapters."""

from datetime import timedelta

import pytest

from deskmetrics.core.errors import StoreError
from deskmetrics.db.base import ConversationBase
from deskmetrics.db.enums import CaseState, OPEN_CASE_STATES
from deskmetrics.schemas.filters import CaseFilters, TimeWindow
from deskmetrics.stores.case_store import CaseStore
from deskmetrics.stores.message_store import MessageStore

from .conftest import NOW


def test_count_by_state_omits_empty_states(relational_factory, make_case):
    make_case(NOW - timedelta(hours=1), state=CaseState.ON_VISIT)
    make_case(NOW - timedelta(hours=2), state=CaseState.ON_VISIT)

    counts = CaseStore(relational_factory).count_by_state()

    assert counts == {CaseState.ON_VISIT: 2}


def test_count_sla_breached_uses_cutoff(relational_factory, make_case):
    make_case(NOW - timedelta(hours=49), state=CaseState.NEW)
    make_case(NOW - timedelta(hours=47), state=CaseState.NEW)
    make_case(NOW - timedelta(hours=80), closed_after=timedelta(hours=1))

    store = CaseStore(relational_factory)

    assert store.count_sla_breached(cutoff=NOW - timedelta(hours=48)) == 1
    assert store.count_cases(states=OPEN_CASE_STATES) == 2


def test_closed_case_durations_in_window(relational_factory, make_case):
    make_case(NOW - timedelta(hours=5), closed_after=timedelta(hours=2))
    make_case(NOW - timedelta(days=20), closed_after=timedelta(hours=9))

    window = TimeWindow(start=NOW - timedelta(days=1), end=NOW)
    durations = CaseStore(relational_factory).closed_case_durations(window=window)

    assert len(durations) == 1
    created, closed = durations[0]
    assert closed - created == timedelta(hours=2)


def test_listed_cases_are_usable_after_session_closes(relational_factory, test_site, make_case):
    make_case(NOW - timedelta(hours=1))

    (case,) = CaseStore(relational_factory).list_cases(CaseFilters(), 0, 10)

    assert case.site.name == test_site.name
    assert case.reporter.full_name == "Carmen Díaz"
    assert case.assignee is None


def test_recent_messages_are_newest_window_in_order(
    conversation_factory, make_conversation, make_messages
):
    make_conversation("+1")
    make_messages("+1", [str(i) for i in range(10)])

    messages = MessageStore(conversation_factory).recent_messages("+1", 3)

    assert [message.content for message in messages] == ["7", "8", "9"]


def test_sqlalchemy_errors_become_store_errors(conversation_factory):
    ConversationBase.metadata.drop_all(conversation_factory.kw["bind"])

    with pytest.raises(StoreError) as exc_info:
        MessageStore(conversation_factory).all_messages("+1")

    assert exc_info.value.store == "messages"
    assert exc_info.value.operation == "all_messages"
    assert exc_info.value.__cause__ is not None
