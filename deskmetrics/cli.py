"""CLI tools for dashboard metrics and reports. Every command prints JSON."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Coroutine
from uuid import UUID

import click
from pydantic import BaseModel

from deskmetrics.core.async_utils import run_async
from deskmetrics.core.constants import (
    DEFAULT_CASE_PAGE_SIZE,
    DEFAULT_CONVERSATION_PAGE_SIZE,
    EXPORT_CASE_PAGE_SIZE,
    MAX_CONVERSATION_PAGE_SIZE,
)
from deskmetrics.core.errors import DeskMetricsError, NotFoundError, StoreError, ValidationError
from deskmetrics.core.structured_logging import configure_logging
from deskmetrics.db.enums import CasePriority, CaseState
from deskmetrics.schemas.filters import CaseFilters, ConversationFilters, make_window
from deskmetrics.services import (
    case_query_service,
    conversation_service,
    metrics_service,
    report_service,
    satisfaction_service,
)
from deskmetrics.stores.sources import get_data_sources
from deskmetrics.utils.datetime_parsing import parse_datetime
from deskmetrics.utils.pagination import get_pagination

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

EXIT_CODES: dict[type[DeskMetricsError], int] = {
    ValidationError: 2,
    NotFoundError: 3,
    StoreError: 4,
}


class DateTimeParam(click.ParamType):
    """ISO-8601 date or datetime, read as UTC when no offset is given."""

    name = "datetime"

    def convert(self, value, param, ctx):
        if isinstance(value, datetime):
            return value
        try:
            return parse_datetime(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


DATETIME = DateTimeParam()


def _execute(coro: Coroutine[object, object, Any]) -> Any:
    try:
        return run_async(coro)
    except DeskMetricsError as exc:
        click.echo(f"❌ {exc}", err=True)
        code = next(
            (code for kind, code in EXIT_CODES.items() if isinstance(exc, kind)),
            1,
        )
        raise click.exceptions.Exit(code)


def _echo(payload: BaseModel | list[BaseModel]) -> None:
    if isinstance(payload, list):
        click.echo(json.dumps([item.model_dump(mode="json") for item in payload], indent=2))
    else:
        click.echo(payload.model_dump_json(indent=2))


def _window_or_exit(start: datetime | None, end: datetime | None):
    try:
        return make_window(start, end)
    except ValidationError as exc:
        click.echo(f"❌ {exc}", err=True)
        raise click.exceptions.Exit(EXIT_CODES[ValidationError])


start_option = click.option("--start", type=DATETIME, default=None, help="Window start (inclusive)")
end_option = click.option("--end", type=DATETIME, default=None, help="Window end (exclusive)")
site_option = click.option("--site", "site_id", type=click.UUID, default=None, help="Site ID")


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL",
)
def cli(log_level: str | None):
    """Service-desk dashboard metrics."""
    configure_logging(level=log_level.upper() if log_level else None)


@cli.command()
@start_option
@end_option
@site_option
def metrics(start: datetime | None, end: datetime | None, site_id: UUID | None):
    """General dashboard metrics; no window means all time."""
    window = _window_or_exit(start, end)
    _echo(_execute(metrics_service.compute_general_metrics(get_data_sources(), window, site_id)))


@cli.command()
@site_option
def overview(site_id: UUID | None):
    """Metrics for today, this month and all time."""
    _echo(_execute(metrics_service.compute_overview(get_data_sources(), site_id)))


@cli.command()
@click.option("--state", type=click.Choice([s.value for s in CaseState]), default=None)
@click.option("--priority", type=click.Choice([p.value for p in CasePriority]), default=None)
@site_option
@click.option("--assignee", "assignee_id", type=click.UUID, default=None, help="Assignee ID")
@start_option
@end_option
@click.option("--page", type=int, default=None)
@click.option("--per-page", type=int, default=None)
@click.option("--all", "export_all", is_flag=True, help=f"Up to {EXPORT_CASE_PAGE_SIZE} cases, unpaginated")
def cases(
    state: str | None,
    priority: str | None,
    site_id: UUID | None,
    assignee_id: UUID | None,
    start: datetime | None,
    end: datetime | None,
    page: int | None,
    per_page: int | None,
    export_all: bool,
):
    """List cases with derived resolution time and SLA status."""
    filters = CaseFilters(
        state=CaseState(state) if state else None,
        priority=CasePriority(priority) if priority else None,
        site_id=site_id,
        assignee_id=assignee_id,
        window=_window_or_exit(start, end),
    )
    sources = get_data_sources()
    if export_all:
        _echo(_execute(case_query_service.list_cases_for_export(sources, filters)))
        return
    try:
        pagination = get_pagination(
            page,
            per_page,
            default_per_page=DEFAULT_CASE_PAGE_SIZE,
            max_per_page=EXPORT_CASE_PAGE_SIZE,
        )
    except ValidationError as exc:
        click.echo(f"❌ {exc}", err=True)
        raise click.exceptions.Exit(EXIT_CODES[ValidationError])
    _echo(_execute(case_query_service.list_cases(sources, filters, pagination)))


@cli.command()
@click.option("--phone", default=None, help="Exact phone number")
@start_option
@end_option
@click.option("--page", type=int, default=None)
@click.option("--per-page", type=int, default=None)
def conversations(
    phone: str | None,
    start: datetime | None,
    end: datetime | None,
    page: int | None,
    per_page: int | None,
):
    """List conversations by most recent activity."""
    filters = ConversationFilters(phone=phone, window=_window_or_exit(start, end))
    try:
        pagination = get_pagination(
            page,
            per_page,
            default_per_page=DEFAULT_CONVERSATION_PAGE_SIZE,
            max_per_page=MAX_CONVERSATION_PAGE_SIZE,
        )
    except ValidationError as exc:
        click.echo(f"❌ {exc}", err=True)
        raise click.exceptions.Exit(EXIT_CODES[ValidationError])
    _echo(_execute(conversation_service.list_conversations(get_data_sources(), filters, pagination)))


@cli.command()
@click.argument("phone")
def conversation(phone: str):
    """Full message history for one phone number."""
    _echo(_execute(conversation_service.get_conversation(get_data_sources(), phone)))


@cli.command()
@start_option
@end_option
@site_option
def satisfaction(start: datetime | None, end: datetime | None, site_id: UUID | None):
    """Survey score averages, distribution and highlighted comments."""
    window = _window_or_exit(start, end)
    _echo(_execute(satisfaction_service.compute_satisfaction(get_data_sources(), window, site_id)))


@cli.command()
@start_option
@end_option
@site_option
@click.option("--sections", is_flag=True, help="Print the four export sheets instead of the report")
def report(start: datetime | None, end: datetime | None, site_id: UUID | None, sections: bool):
    """Composite report for a required window."""
    result = _execute(report_service.generate_report(get_data_sources(), start, end, site_id))
    if sections:
        _echo(report_service.build_export_sections(result))
    else:
        _echo(result)


if __name__ == "__main__":
    cli()
