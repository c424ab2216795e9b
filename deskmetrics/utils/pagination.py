"""Pagination utilities for list operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from deskmetrics.core.errors import ValidationError


T = TypeVar("T")

DEFAULT_PAGE = 1


@dataclass(frozen=True)
class PaginationParams:
    """1-indexed page and page size."""
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def get_pagination(
    page: int | None,
    per_page: int | None,
    *,
    default_per_page: int,
    max_per_page: int,
) -> PaginationParams:
    """
    Resolve optional page arguments against an operation's defaults.

    Usage:
        pagination = get_pagination(page, per_page, default_per_page=50, max_per_page=10_000)
    """
    page = DEFAULT_PAGE if page is None else page
    per_page = default_per_page if per_page is None else per_page
    if page < 1:
        raise ValidationError(f"page must be >= 1, got {page}")
    if per_page < 1 or per_page > max_per_page:
        raise ValidationError(f"per_page must be between 1 and {max_per_page}, got {per_page}")
    return PaginationParams(page=page, per_page=per_page)


class PaginatedResponse(BaseModel, Generic[T]):
    """Standard paginated response structure."""
    items: list[T]
    total: int
    page: int
    per_page: int
    pages: int

    @classmethod
    def create(cls, items: list[T], total: int, pagination: PaginationParams) -> "PaginatedResponse[T]":
        pages = (total + pagination.per_page - 1) // pagination.per_page if pagination.per_page > 0 else 0
        return cls(
            items=items,
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
            pages=pages,
        )
