"""Shared plumbing for the SQLAlchemy store adapters."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID

from sqlalchemy import ColumnElement
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from deskmetrics.core.errors import StoreError
from deskmetrics.core.structured_logging import build_log_context
from deskmetrics.db.models import Case
from deskmetrics.schemas.filters import TimeWindow

logger = logging.getLogger(__name__)


class SqlStore:
    """
    Base for read-only adapters.

    Each call opens its own short-lived session so calls can run on separate
    threads. Any SQLAlchemy failure surfaces as StoreError.
    """

    name = "store"

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        try:
            with self._session_factory() as db:
                yield db
        except SQLAlchemyError as exc:
            logger.warning(
                "Store query failed store=%s operation=%s error=%s",
                self.name,
                operation,
                exc,
                extra=build_log_context(operation=operation, store=self.name),
            )
            raise StoreError(self.name, operation, str(exc)) from exc


def case_scope(
    window: TimeWindow | None = None,
    site_id: UUID | None = None,
    assignee_id: UUID | None = None,
) -> list[ColumnElement[bool]]:
    """Conditions on Case for a [start, end) creation window, site and assignee."""
    conditions: list[ColumnElement[bool]] = []
    if window is not None:
        conditions.append(Case.created_at >= window.start)
        conditions.append(Case.created_at < window.end)
    if site_id is not None:
        conditions.append(Case.site_id == site_id)
    if assignee_id is not None:
        conditions.append(Case.assignee_id == assignee_id)
    return conditions
