"""
Pagination and sorting for list queries.

Client-supplied ``sort`` values are only ever turned into column names
after they have been matched exactly against a per-query safelist.  A
leading ``-`` on a safelist entry means descending order.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, model_serializer

from app.core.errors import InvariantViolation
from app.core.validator import Validator, permitted_value

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100


class Filters(BaseModel):
    """Page, page size and sort requested by a client for one list query."""

    page: int = 1
    page_size: int = 20
    sort: str = "id"
    sort_safelist: tuple[str, ...] = ("id",)

    def sort_column(self) -> str:
        """
        Bare column name for ``sort``.

        Only called after :func:`validate_filters` passed.  A value outside
        the safelist here means validation was skipped, so rather than build
        a query from it this raises :class:`InvariantViolation`.
        """
        for safe_value in self.sort_safelist:
            if self.sort == safe_value:
                return safe_value.removeprefix("-")
        raise InvariantViolation(f"unsafe sort parameter: {self.sort!r}")

    def sort_direction(self) -> str:
        return "DESC" if self.sort.startswith("-") else "ASC"

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def validate_filters(v: Validator, f: Filters) -> None:
    v.check(f.page > 0, "page", "must be greater than zero")
    v.check(f.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(f.page_size > 0, "page_size", "must be greater than zero")
    v.check(f.page_size <= MAX_PAGE_SIZE, "page_size", f"must be a maximum of {MAX_PAGE_SIZE}")
    v.check(permitted_value(f.sort, *f.sort_safelist), "sort", "invalid sort value")


class Metadata(BaseModel):
    """Pagination summary.  All zeros means the result was empty."""

    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    @model_serializer(mode="wrap")
    def _omit_zero(self, handler):
        return {key: value for key, value in handler(self).items() if value}


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )
