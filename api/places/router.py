"""
Places API endpoints.

Query parameters are declared as plain strings on purpose: malformed values
(e.g. `page=abc`) fall back to defaults in the service instead of failing
request validation. Database-backed endpoints stop their queries when the
client disconnects.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from core.disconnect import run_until_disconnect

from . import service

router = APIRouter(prefix="/api/places")


@router.get("")
async def list_places(
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    location: str | None = None,
    country: str | None = None,
    category: str | None = None,
    visitors: str | None = None,
    rating: str | None = None,
    accommodation_available: str | None = None,
    address: str | None = None,
    search: str | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
    top_only: str | None = Query(default=None, alias="topOnly"),
) -> dict:
    params = {
        "page": page,
        "limit": limit,
        "location": location,
        "country": country,
        "category": category,
        "visitors": visitors,
        "rating": rating,
        "accommodation_available": accommodation_available,
        "address": address,
        "search": search,
        "sortBy": sort_by,
        "sortOrder": sort_order,
        "topOnly": top_only,
    }
    return await run_until_disconnect(request, service.list_places(params))


@router.get("/filters")
async def filter_options(request: Request) -> dict:
    return await run_until_disconnect(request, service.filter_options())


@router.get("/place-url")
async def place_url(placeid: str | None = None) -> dict:
    return await service.place_url(placeid)


@router.get("/stats")
async def place_stats(
    request: Request,
    country: str | None = None,
    category: str | None = None,
) -> dict:
    return await run_until_disconnect(
        request,
        service.place_stats({"country": country, "category": category}),
    )
