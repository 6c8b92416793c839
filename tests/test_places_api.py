from __future__ import annotations

import asyncio
import logging
from decimal import Decimal

import pytest

from core import db, disconnect
from core.pagination import MAX_LIMIT
from main import app
from places import repository


class FakePlaces:
    """In-memory stand-in for the places repository."""

    def __init__(self, rows):
        self.rows = rows
        self.page_calls: list[tuple] = []
        self.top_calls: list = []

    def _matching(self, predicate):
        # Only equality fragments are interpreted; enough for these tests.
        matched = list(self.rows)
        for fragment in predicate.fragments:
            if fragment.sql == "FALSE":
                return []
            column = fragment.sql.split(" = ")[0]
            value = predicate.values[fragment.placeholder - 1]
            matched = [r for r in matched if r.get(column) == value]
        return matched

    async def fetch_top(self, predicate):
        self.top_calls.append(predicate)
        matched = sorted(self._matching(predicate), key=lambda r: r["visitors"], reverse=True)
        return matched[:10]

    async def fetch_page(self, predicate, *, sort, page):
        self.page_calls.append((predicate, sort, page))
        matched = sorted(
            self._matching(predicate),
            key=lambda r: r[sort.column],
            reverse=sort.direction.value == "DESC",
        )
        return len(matched), matched[page.offset : page.offset + page.limit]


def _place(i, **overrides):
    row = {
        "location": f"Place {i:02d}",
        "country": "Lebanon",
        "category": "Restaurant" if i % 2 else "Beach",
        "visitors": i * 100,
        "rating": 4.0,
        "address": f"Street {i}",
    }
    row.update(overrides)
    return row


@pytest.fixture
def places(monkeypatch):
    fake = FakePlaces([_place(i) for i in range(1, 24)])
    monkeypatch.setattr(repository, "fetch_top", fake.fetch_top)
    monkeypatch.setattr(repository, "fetch_page", fake.fetch_page)
    return fake


def test_default_listing_is_first_page_of_ten(client, places):
    resp = client.get("/api/places")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert len(body["data"]) == 10
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 3,
        "totalRecords": 23,
        "limit": 10,
        "hasNextPage": True,
        "hasPrevPage": False,
    }
    assert "topOnly" not in body


def test_last_page_metadata(client, places):
    body = client.get("/api/places", params={"page": "3", "limit": "10"}).json()

    assert len(body["data"]) == 3
    assert body["pagination"]["hasNextPage"] is False
    assert body["pagination"]["hasPrevPage"] is True


def test_filters_and_page_for_restaurants(client, places):
    body = client.get(
        "/api/places",
        params={"country": "Lebanon", "category": "Restaurant", "page": "2", "limit": "5"},
    ).json()

    predicate, sort, page = places.page_calls[-1]
    assert predicate.values == ("Lebanon", "Restaurant")
    assert (sort.column, sort.direction.value) == ("location", "ASC")
    assert (page.limit, page.offset) == (5, 5)
    assert body["pagination"]["totalRecords"] == 12
    assert body["pagination"]["totalPages"] == 3
    assert [r["location"] for r in body["data"]] == ["Place 11", "Place 13", "Place 15", "Place 17", "Place 19"]


def test_malformed_page_and_sort_degrade_to_defaults(client, places):
    resp = client.get("/api/places", params={"page": "abc", "limit": "-1", "sortBy": "droptable", "sortOrder": "sideways"})

    assert resp.status_code == 200
    _, sort, page = places.page_calls[-1]
    assert (page.page, page.limit) == (1, 10)
    assert (sort.column, sort.direction.value) == ("location", "ASC")


def test_unparseable_typed_filter_matches_nothing(client, places):
    resp = client.get("/api/places", params={"visitors": "lots"})

    assert resp.status_code == 200
    assert resp.json()["data"] == []
    assert resp.json()["pagination"]["totalRecords"] == 0


def test_top_only_ignores_pagination_and_sort(client, places):
    body = client.get(
        "/api/places",
        params={"topOnly": "true", "page": "3", "limit": "2", "sortBy": "rating", "sortOrder": "asc"},
    ).json()

    assert body["topOnly"] is True
    assert "pagination" not in body
    assert len(body["data"]) == 10
    visitors = [r["visitors"] for r in body["data"]]
    assert visitors == sorted(visitors, reverse=True)
    assert places.page_calls == []


def test_same_request_twice_is_idempotent(client, places):
    params = {"category": "Beach", "sortBy": "visitors", "sortOrder": "desc", "page": "2", "limit": "3"}
    first = client.get("/api/places", params=params).json()
    second = client.get("/api/places", params=params).json()

    assert first == second


def test_store_failure_is_reported_as_service_error(client, monkeypatch, caplog):
    async def failing_fetch_page(predicate, *, sort, page):
        raise db.DatabaseError("connection reset by peer")

    monkeypatch.setattr(repository, "fetch_page", failing_fetch_page)

    with caplog.at_level(logging.ERROR):
        resp = client.get("/api/places")

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "Failed to fetch places",
        "message": "connection reset by peer",
    }
    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].exc_info is not None


def test_oversized_numbers_never_reach_the_store(client, places):
    resp = client.get(
        "/api/places",
        params={"page": "99999999999999999999", "limit": "99999999999999999999", "visitors": "99999999999999999999"},
    )

    assert resp.status_code == 200
    predicate, _, page = places.page_calls[-1]
    assert predicate.where_clause() == "WHERE FALSE"
    assert (page.page, page.limit) == (1, MAX_LIMIT)
    assert resp.json()["data"] == []


@pytest.mark.parametrize("flag", ["TRUE", "True", "1", "yes"])
def test_top_only_requires_exact_lowercase_true(client, places, flag):
    body = client.get("/api/places", params={"topOnly": flag}).json()

    assert "topOnly" not in body
    assert "pagination" in body
    assert places.top_calls == []


def test_client_disconnect_cancels_page_query(monkeypatch):
    events = []

    async def slow_fetch_page(predicate, *, sort, page):
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            events.append("cancelled")
            raise
        events.append("completed")
        return 0, []

    monkeypatch.setattr(repository, "fetch_page", slow_fetch_page)
    monkeypatch.setattr(disconnect, "DISCONNECT_POLL_S", 0.01)

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": "/api/places",
        "raw_path": b"/api/places",
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", b"testserver")],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }
    sent = []

    async def receive():
        return {"type": "http.disconnect"}

    async def send(message):
        sent.append(message)

    asyncio.run(asyncio.wait_for(app(scope, receive, send), timeout=2))

    assert events == ["cancelled"]
    assert sent[0]["status"] == disconnect.CLIENT_CLOSED_REQUEST


def test_stats_uses_only_country_and_category(client, monkeypatch):
    seen = []

    async def fake_fetch_stats(predicate):
        seen.append(predicate)
        return {
            "total_places": 4,
            "avg_rating": Decimal("4.1234"),
            "min_rating": 3.5,
            "max_rating": 5,
            "total_visitors": 1200,
            "avg_visitors": Decimal("300.0000"),
        }

    monkeypatch.setattr(repository, "fetch_stats", fake_fetch_stats)

    body = client.get("/api/places/stats", params={"country": "Lebanon", "rating": "5"}).json()

    assert seen[0].values == ("Lebanon",)
    assert body == {
        "success": True,
        "stats": {
            "totalPlaces": 4,
            "avgRating": "4.12",
            "minRating": "3.50",
            "maxRating": "5.00",
            "totalVisitors": 1200,
            "avgVisitors": "300.00",
        },
    }


def test_stats_over_empty_match_are_zero(client, monkeypatch):
    async def fake_fetch_stats(predicate):
        return {
            "total_places": 0,
            "avg_rating": 0,
            "min_rating": 0,
            "max_rating": 0,
            "total_visitors": 0,
            "avg_visitors": 0,
        }

    monkeypatch.setattr(repository, "fetch_stats", fake_fetch_stats)

    stats = client.get("/api/places/stats", params={"country": "Atlantis"}).json()["stats"]

    assert stats == {
        "totalPlaces": 0,
        "avgRating": "0.00",
        "minRating": "0.00",
        "maxRating": "0.00",
        "totalVisitors": 0,
        "avgVisitors": "0.00",
    }


def test_filter_options(client, monkeypatch):
    async def fake_distinct():
        return {"location": ["Byblos"], "country": ["Lebanon"], "rating": [4.5]}

    monkeypatch.setattr(repository, "fetch_distinct_values", fake_distinct)

    filters = client.get("/api/places/filters").json()["filters"]

    assert filters["locations"] == ["Byblos"]
    assert filters["countries"] == ["Lebanon"]
    assert filters["ratings"] == [4.5]
    assert filters["addresses"] == []


def test_place_url_requires_placeid(client):
    resp = client.get("/api/places/place-url")

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "placeid is required"}


def test_place_url_resolves_through_google(client, monkeypatch):
    from core import google_maps

    async def fake_place_url(place_id, *, api_key, base_url):
        return f"https://maps.google.com/?cid={place_id}"

    monkeypatch.setattr(google_maps, "place_url", fake_place_url)

    resp = client.get("/api/places/place-url", params={"placeid": "abc123"})

    assert resp.json() == {"url": "https://maps.google.com/?cid=abc123"}


def test_place_url_not_found(client, monkeypatch):
    from core import google_maps

    async def fake_place_url(place_id, *, api_key, base_url):
        return None

    monkeypatch.setattr(google_maps, "place_url", fake_place_url)

    assert client.get("/api/places/place-url", params={"placeid": "zzz"}).status_code == 404


def test_place_url_without_api_key_is_upstream_error(client):
    resp = client.get("/api/places/place-url", params={"placeid": "abc"})

    assert resp.status_code == 502
    assert resp.json()["error"] == "Google API error"
