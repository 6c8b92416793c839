"""
Page/limit parsing and page metadata shared by the listing endpoints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from . import numbers

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _positive_int(raw: object, default: int) -> int:
    if isinstance(raw, bool):
        return default
    value = raw if isinstance(raw, int) else numbers.parse_int(raw)
    if value is None or value < 1:
        return default
    return value


@dataclass(frozen=True)
class PageRequest:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def parse(
        cls,
        page: object = None,
        limit: object = None,
        *,
        default_limit: int = DEFAULT_LIMIT,
    ) -> PageRequest:
        """
        Coerce raw query values into a valid request.

        Missing, non-numeric, zero or negative values fall back to the
        defaults; this never raises. `limit` is clamped to MAX_LIMIT, and a
        page whose offset would not fit a BIGINT falls back to page 1.
        """
        resolved_limit = min(_positive_int(limit, default_limit), MAX_LIMIT)
        resolved_page = _positive_int(page, DEFAULT_PAGE)
        if (resolved_page - 1) * resolved_limit > numbers.INT8_MAX:
            resolved_page = DEFAULT_PAGE
        return cls(page=resolved_page, limit=resolved_limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageResult:
    rows: list[dict[str, Any]]
    current_page: int
    total_pages: int
    total_records: int
    limit: int

    @classmethod
    def build(cls, rows: list[dict[str, Any]], *, total_records: int, request: PageRequest) -> PageResult:
        return cls(
            rows=rows,
            current_page=request.page,
            total_pages=math.ceil(total_records / request.limit),
            total_records=total_records,
            limit=request.limit,
        )

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    def metadata(self) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalRecords": self.total_records,
            "limit": self.limit,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
        }
