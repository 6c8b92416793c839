"""
Places SQL execution.

Query text is assembled in `query.py`; this module only runs it against the
pool and shapes raw rows.
"""

from __future__ import annotations

import logging
from typing import Any

from core import db
from core.pagination import PageRequest

from . import query
from .filters import CompiledPredicate, filterable_columns
from .sorting import SortChoice

logger = logging.getLogger(__name__)


def _log_query(name: str, q: query.Query) -> None:
    logger.debug("places_query name=%s args=%s sql=%s", name, len(q.args), " ".join(q.text.split()))


async def fetch_top(predicate: CompiledPredicate) -> list[dict[str, Any]]:
    q = query.top_query(predicate)
    _log_query("top", q)
    return await db.fetch_all(q.text, *q.args)


async def fetch_page(
    predicate: CompiledPredicate,
    *,
    sort: SortChoice,
    page: PageRequest,
) -> tuple[int, list[dict[str, Any]]]:
    """
    Count, then fetch one page, inside one read snapshot.

    Returns (total_records, rows). A failing count never reaches the page query.
    """
    count_q = query.count_query(predicate)
    page_q = query.page_query(predicate, sort, page)
    _log_query("count", count_q)
    _log_query("page", page_q)

    async with db.read_snapshot() as conn:
        row = await db.fetch_one(count_q.text, *count_q.args, conn=conn)
        total = int((row or {}).get("count") or 0)
        rows = await db.fetch_all(page_q.text, *page_q.args, conn=conn)
    return total, rows


async def fetch_stats(predicate: CompiledPredicate) -> dict[str, Any]:
    q = query.stats_query(predicate)
    _log_query("stats", q)
    return await db.fetch_one(q.text, *q.args) or {}


async def fetch_distinct_values() -> dict[str, list[Any]]:
    """
    Distinct non-null values per filterable column, keyed by column name.
    """
    options: dict[str, list[Any]] = {}
    for column in filterable_columns():
        q = query.distinct_values_query(column)
        rows = await db.fetch_all(q.text)
        options[column] = [r[column] for r in rows]
    return options


async def place_exists(place_id: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM places
        WHERE placeid = $1
        LIMIT 1
        """,
        place_id,
    )
    return row is not None
