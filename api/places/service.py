"""
Places service (orchestration).

Compiles request parameters into a predicate, picks the query shape and
turns rows into response bodies. Store failures become `ServiceError`; an
empty result is a normal response.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import HTTPException

from core import db, google_maps, settings
from core.errors import ServiceError
from core.pagination import PageRequest, PageResult

from . import repository
from .filters import PLACE_FILTERS, STATS_FILTERS, compile_filters
from .sorting import validate_sort


def google_api_key() -> str:
    return settings.env_str("GOOGLE_API_KEY")


def google_maps_base_url() -> str:
    return settings.env_str("GOOGLE_MAPS_BASE_URL", google_maps.DEFAULT_BASE_URL)


def _is_true(raw: object) -> bool:
    return raw == "true"


def _fixed2(value: Any) -> str:
    return f"{float(value or 0):.2f}"


async def list_places(params: Mapping[str, Any]) -> dict[str, Any]:
    """
    `params` holds the raw query-string values; unknown keys are ignored.
    """
    predicate = compile_filters(params, PLACE_FILTERS)

    if _is_true(params.get("topOnly")):
        try:
            rows = await repository.fetch_top(predicate)
        except db.DatabaseError as exc:
            raise ServiceError("Failed to fetch places", message=str(exc)) from exc
        return {"success": True, "data": rows, "topOnly": True}

    page = PageRequest.parse(params.get("page"), params.get("limit"))
    sort = validate_sort(params.get("sortBy"), params.get("sortOrder"))
    try:
        total, rows = await repository.fetch_page(predicate, sort=sort, page=page)
    except db.DatabaseError as exc:
        raise ServiceError("Failed to fetch places", message=str(exc)) from exc

    result = PageResult.build(rows, total_records=total, request=page)
    return {"success": True, "data": result.rows, "pagination": result.metadata()}


async def place_stats(params: Mapping[str, Any]) -> dict[str, Any]:
    predicate = compile_filters(params, STATS_FILTERS)
    try:
        row = await repository.fetch_stats(predicate)
    except db.DatabaseError as exc:
        raise ServiceError("Failed to fetch statistics", message=str(exc)) from exc

    return {
        "success": True,
        "stats": {
            "totalPlaces": int(row.get("total_places") or 0),
            "avgRating": _fixed2(row.get("avg_rating")),
            "minRating": _fixed2(row.get("min_rating")),
            "maxRating": _fixed2(row.get("max_rating")),
            "totalVisitors": int(row.get("total_visitors") or 0),
            "avgVisitors": _fixed2(row.get("avg_visitors")),
        },
    }


async def filter_options() -> dict[str, Any]:
    try:
        options = await repository.fetch_distinct_values()
    except db.DatabaseError as exc:
        raise ServiceError("Failed to fetch filter options", message=str(exc)) from exc

    return {
        "success": True,
        "filters": {
            "locations": options.get("location", []),
            "countries": options.get("country", []),
            "categories": options.get("category", []),
            "visitors": options.get("visitors", []),
            "ratings": options.get("rating", []),
            "accommodations": options.get("accommodation_available", []),
            "addresses": options.get("address", []),
        },
    }


async def place_url(place_id: str | None) -> dict[str, str]:
    place_id = (place_id or "").strip()
    if not place_id:
        raise HTTPException(status_code=400, detail="placeid is required")

    try:
        url = await google_maps.place_url(
            place_id,
            api_key=google_api_key(),
            base_url=google_maps_base_url(),
        )
    except google_maps.GoogleMapsError as exc:
        raise ServiceError("Google API error", message=str(exc), status_code=502) from exc

    if url is None:
        raise HTTPException(status_code=404, detail="No URL found for this place")
    return {"url": url}
