"""Structured logging helpers (PHI-safe)."""

import logging
from datetime import datetime
from typing import Any

from deskmetrics.core.config import settings


def configure_logging(level: int | str | None = None) -> None:
    """Install the default console handler used by the CLI."""
    logging.basicConfig(
        level=level if level is not None else settings.log_level_value,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_log_context(
    *,
    operation: str | None = None,
    site_id: str | None = None,
    window_start: datetime | None = None,
    window_end: datetime | None = None,
    store: str | None = None,
) -> dict[str, Any]:
    """Return a PHI-safe log context dict (no phone numbers, names or comments)."""
    context: dict[str, Any] = {}
    if operation:
        context["operation"] = operation
    if site_id:
        context["site_id"] = site_id
    if window_start:
        context["window_start"] = window_start.isoformat()
    if window_end:
        context["window_end"] = window_end.isoformat()
    if store:
        context["store"] = store
    return context
