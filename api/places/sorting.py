"""
Sort validation: map a requested column/direction onto the whitelist.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


SORTABLE_COLUMNS: frozenset[str] = frozenset(
    {
        "location",
        "country",
        "category",
        "visitors",
        "rating",
        "accommodation_available",
        "address",
    }
)

DEFAULT_SORT_COLUMN = "location"
DEFAULT_SORT_DIRECTION = SortDirection.ASC


@dataclass(frozen=True)
class SortChoice:
    column: str = DEFAULT_SORT_COLUMN
    direction: SortDirection = DEFAULT_SORT_DIRECTION

    def order_by(self) -> str:
        return f"ORDER BY {self.column} {self.direction.value}"


def validate_sort(column: str | None, direction: str | None) -> SortChoice:
    """
    Never raises: unknown columns map to the default column, and anything
    other than "desc" (any case) sorts ascending.
    """
    requested = (column or "").lower()
    resolved = requested if requested in SORTABLE_COLUMNS else DEFAULT_SORT_COLUMN
    order = SortDirection.DESC if (direction or "").lower() == "desc" else SortDirection.ASC
    return SortChoice(column=resolved, direction=order)
