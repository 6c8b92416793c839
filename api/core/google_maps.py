"""
Google Maps Place Details client.

Used endpoint:
- GET /maps/api/place/details/json?place_id=...&fields=url -> {"result": {"url": "..."}}
"""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_BASE_URL = "https://maps.googleapis.com"


class GoogleMapsError(RuntimeError):
    pass


async def place_url(
    place_id: str,
    *,
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout_s: float = 15.0,
) -> str | None:
    """
    Return the public Maps URL for `place_id`, or None when Google has none.
    """
    if not api_key:
        raise GoogleMapsError("GOOGLE_API_KEY is not set.")

    try:
        async with httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout_s) as client:
            resp = await client.get(
                "/maps/api/place/details/json",
                params={"place_id": place_id, "fields": "url", "key": api_key},
            )
    except httpx.HTTPError as exc:
        raise GoogleMapsError(f"Place details request failed: {exc}") from exc

    if resp.status_code != 200:
        raise GoogleMapsError(f"Place details request failed: {resp.status_code} {resp.text[:300]}")

    try:
        data: Any = resp.json()
    except ValueError as exc:
        raise GoogleMapsError("Place details returned invalid JSON.") from exc
    if not isinstance(data, dict):
        raise GoogleMapsError("Place details returned a non-object response.")

    result = data.get("result")
    if not isinstance(result, dict):
        return None
    url = result.get("url")
    return url if isinstance(url, str) and url else None
