"""Relational store models: sites, reporters, assignees, cases, surveys, follow-ups.

Rows are written by the case-management workflow and the survey collection
flow; this package only reads them.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deskmetrics.db.base import Base
from deskmetrics.db.enums import CasePriority, CaseState, FollowUpOutcome, SurveyState
from deskmetrics.db.models._types import enum_type


class Site(Base):
    """A property/location cases are reported against."""

    __tablename__ = "sites"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Assignee(Base):
    """Technician responsible for cases."""

    __tablename__ = "assignees"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)


class Reporter(Base):
    """Resident who opened the case."""

    __tablename__ = "reporters"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)


class Case(Base):
    """A tracked service request."""

    __tablename__ = "cases"
    __table_args__ = (
        Index("idx_cases_site_created", "site_id", "created_at"),
        Index("idx_cases_assignee_created", "assignee_id", "created_at"),
        Index("idx_cases_state", "state"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("sites.id", ondelete="RESTRICT"), nullable=False
    )
    reporter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("reporters.id", ondelete="RESTRICT"), nullable=False
    )
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("assignees.id", ondelete="SET NULL"), nullable=True
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    state: Mapped[CaseState] = mapped_column(
        enum_type(CaseState, name="case_state"), nullable=False
    )
    priority: Mapped[CasePriority] = mapped_column(
        enum_type(CasePriority, name="case_priority"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    # Set iff state == closed
    closed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    # Maintained by the case workflow; reads use the 48h rule instead
    sla_breached: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    satisfaction_score: Mapped[Decimal | None] = mapped_column(Numeric(3, 2), nullable=True)

    site: Mapped["Site"] = relationship()
    reporter: Mapped["Reporter"] = relationship()
    assignee: Mapped["Assignee | None"] = relationship()


class SatisfactionSurvey(Base):
    """Post-closure survey sent to the reporter of a case."""

    __tablename__ = "satisfaction_surveys"
    __table_args__ = (Index("idx_surveys_state_responded", "state", "responded_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    state: Mapped[SurveyState] = mapped_column(
        enum_type(SurveyState, name="survey_state"), nullable=False
    )
    technician_attitude: Mapped[int | None] = mapped_column(Integer, nullable=True)
    repair_speed: Mapped[int | None] = mapped_column(Integer, nullable=True)
    service_quality: Mapped[int | None] = mapped_column(Integer, nullable=True)
    overall_average: Mapped[Decimal | None] = mapped_column(Numeric(3, 2), nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Set iff state == completed
    responded_at: Mapped[datetime | None] = mapped_column(nullable=True)

    case: Mapped["Case"] = relationship()


class FollowUp(Base):
    """Automated follow-up attached to a case."""

    __tablename__ = "case_follow_ups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False
    )
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    outcome: Mapped[FollowUpOutcome | None] = mapped_column(
        enum_type(FollowUpOutcome, name="follow_up_outcome"), nullable=True
    )

    case: Mapped["Case"] = relationship()
