"""
Query assembly for the `places` table.

Each builder takes a `CompiledPredicate` and returns a `Query` whose text only
ever contains identifiers from this module, `filters` or `sorting`; request
values live in `Query.args`, bound to `$n` placeholders in order.

Shapes:
- top-N: most visited places, fixed size, no pagination
- count + page: total for the predicate, then one page in the requested order
- stats: aggregate scalars over the predicate
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.pagination import PageRequest

from .filters import CompiledPredicate, filterable_columns
from .sorting import SortChoice

TABLE = "places"

# Size of the top-N result set; never paginated.
TOP_N_LIMIT = 10
POPULARITY_COLUMN = "visitors"

# Cap for distinct-value lists of free-form columns.
DISTINCT_VALUES_CAP = 1000
CAPPED_DISTINCT_COLUMNS = frozenset({"location", "address"})

PLACE_COLUMNS: tuple[str, ...] = (
    "location",
    "country",
    "category",
    "visitors",
    "rating",
    "revenue",
    "accommodation_available",
    "placeid",
    "address",
    "imageurl",
    "latitude",
    "longitude",
    "pricelevel",
    "isopen",
    "types",
)


@dataclass(frozen=True)
class Query:
    text: str
    args: tuple[Any, ...] = ()


def _select_places(where: str) -> str:
    columns = ",\n          ".join(PLACE_COLUMNS)
    text = f"""
        SELECT
          {columns}
        FROM {TABLE}"""
    if where:
        text += f"\n        {where}"
    return text


def top_query(predicate: CompiledPredicate) -> Query:
    text = (
        _select_places(predicate.where_clause())
        + f"\n        ORDER BY {POPULARITY_COLUMN} DESC"
        + f"\n        LIMIT {TOP_N_LIMIT}\n"
    )
    return Query(text=text, args=predicate.values)


def count_query(predicate: CompiledPredicate) -> Query:
    where = predicate.where_clause()
    text = f"SELECT COUNT(*) AS count FROM {TABLE}"
    if where:
        text += f" {where}"
    return Query(text=text, args=predicate.values)


def page_query(predicate: CompiledPredicate, sort: SortChoice, page: PageRequest) -> Query:
    """
    LIMIT/OFFSET placeholders continue the filter numbering.
    """
    limit_index = predicate.next_placeholder
    offset_index = limit_index + 1
    text = (
        _select_places(predicate.where_clause())
        + f"\n        {sort.order_by()}"
        + f"\n        LIMIT ${limit_index} OFFSET ${offset_index}\n"
    )
    return Query(text=text, args=predicate.values + (page.limit, page.offset))


def stats_query(predicate: CompiledPredicate) -> Query:
    where = predicate.where_clause()
    text = f"""
        SELECT
          COUNT(*) AS total_places,
          COALESCE(AVG(rating), 0) AS avg_rating,
          COALESCE(MIN(rating), 0) AS min_rating,
          COALESCE(MAX(rating), 0) AS max_rating,
          COALESCE(SUM({POPULARITY_COLUMN}), 0) AS total_visitors,
          COALESCE(AVG({POPULARITY_COLUMN}), 0) AS avg_visitors
        FROM {TABLE}"""
    if where:
        text += f"\n        {where}"
    return Query(text=text + "\n", args=predicate.values)


def distinct_values_query(column: str) -> Query:
    if column not in filterable_columns():
        raise ValueError(f"Column is not filterable: {column}")
    text = f"SELECT DISTINCT {column} FROM {TABLE} WHERE {column} IS NOT NULL ORDER BY {column}"
    if column in CAPPED_DISTINCT_COLUMNS:
        text += f" LIMIT {DISTINCT_VALUES_CAP}"
    return Query(text=text)
