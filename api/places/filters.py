"""
Filter compilation for place queries.

Recognized request parameters are declared once in `PLACE_FILTERS`; the
compiler walks that declaration (never the request) so unknown keys are
ignored and fragment order is stable. Column names in fragments come only
from the declaration. Every request value is bound to a positional
placeholder.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core import numbers


class Match(str, Enum):
    EQUALS = "equals"
    SEARCH = "search"


# Columns covered by the free-text `search` parameter, in OR-group order.
SEARCH_COLUMNS: tuple[str, ...] = ("location", "country", "category", "address")

# Emitted in place of a typed predicate whose value does not parse.
NO_MATCH_FRAGMENT = "FALSE"


@dataclass(frozen=True)
class FilterField:
    key: str
    match: Match = Match.EQUALS
    value_type: type = str

    @property
    def column(self) -> str:
        return self.key


PLACE_FILTERS: tuple[FilterField, ...] = (
    FilterField("location"),
    FilterField("country"),
    FilterField("category"),
    FilterField("visitors", value_type=int),
    FilterField("rating", value_type=float),
    FilterField("accommodation_available"),
    FilterField("address"),
    FilterField("search", match=Match.SEARCH),
)

STATS_FILTERS: tuple[FilterField, ...] = (
    FilterField("country"),
    FilterField("category"),
)


@dataclass(frozen=True)
class Fragment:
    sql: str
    placeholder: int | None


@dataclass(frozen=True)
class CompiledPredicate:
    fragments: tuple[Fragment, ...] = ()
    values: tuple[Any, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.fragments

    @property
    def next_placeholder(self) -> int:
        return len(self.values) + 1

    def where_clause(self) -> str:
        if self.is_empty:
            return ""
        return "WHERE " + " AND ".join(f.sql for f in self.fragments)


class _Unparseable(ValueError):
    pass


def _coerce(raw: str, value_type: type) -> Any:
    if value_type is int:
        value = numbers.parse_int(raw)
        # Integer columns are INTEGER; a wider value could never match and
        # would fail to encode.
        if value is None or not numbers.INT4_MIN <= value <= numbers.INT4_MAX:
            raise _Unparseable(raw)
        return value
    if value_type is float:
        value = numbers.parse_float(raw)
        if value is None:
            raise _Unparseable(raw)
        return value
    return raw


def _search_fragment(index: int) -> str:
    ors = " OR ".join(f"LOWER({col}) LIKE LOWER(${index})" for col in SEARCH_COLUMNS)
    return f"({ors})"


def compile_filters(
    params: Mapping[str, Any],
    fields: tuple[FilterField, ...] = PLACE_FILTERS,
) -> CompiledPredicate:
    """
    Build the predicate for the recognized keys present in `params`.

    Absent and empty values contribute nothing. A typed value that does not
    parse compiles to a constant FALSE fragment, so the query matches no rows
    and binds nothing for that field.
    """
    fragments: list[Fragment] = []
    values: list[Any] = []

    for field in fields:
        raw = params.get(field.key)
        if raw is None:
            continue
        raw = str(raw)
        if raw == "":
            continue

        if field.match is Match.SEARCH:
            values.append(f"%{raw}%")
            index = len(values)
            fragments.append(Fragment(_search_fragment(index), index))
            continue

        try:
            value = _coerce(raw, field.value_type)
        except _Unparseable:
            fragments.append(Fragment(NO_MATCH_FRAGMENT, None))
            continue

        values.append(value)
        index = len(values)
        fragments.append(Fragment(f"{field.column} = ${index}", index))

    return CompiledPredicate(fragments=tuple(fragments), values=tuple(values))


def filterable_columns() -> tuple[str, ...]:
    return tuple(f.column for f in PLACE_FILTERS if f.match is Match.EQUALS)
