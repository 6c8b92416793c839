"""
User profile and liked-places persistence.
"""

from __future__ import annotations

from typing import Any

from core import db


async def get_profile(user_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, username, email, created_at, updated_at
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def email_taken_by_other(email: str, *, user_id: int) -> bool:
    row = await db.fetch_one(
        "SELECT id FROM users WHERE lower(email) = lower($1) AND id <> $2 LIMIT 1",
        email,
        user_id,
    )
    return row is not None


async def update_profile(user_id: int, *, username: str, email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        UPDATE users
        SET username = $1,
            email = $2
        WHERE id = $3
        RETURNING id, username, email, created_at
        """,
        username,
        email,
        user_id,
    )


async def list_liked_places(user_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT
          p.placeid AS id,
          p.location AS name,
          p.category,
          p.address,
          p.rating,
          p.imageurl AS image_url,
          ulp.liked_at
        FROM user_liked_places ulp
        JOIN places p ON ulp.place_id = p.placeid
        WHERE ulp.user_id = $1
        ORDER BY ulp.liked_at DESC
        """,
        user_id,
    )


async def is_liked(user_id: int, place_id: str) -> bool:
    row = await db.fetch_one(
        "SELECT id FROM user_liked_places WHERE user_id = $1 AND place_id = $2 LIMIT 1",
        user_id,
        place_id,
    )
    return row is not None


async def insert_like(user_id: int, place_id: str) -> None:
    await db.execute(
        "INSERT INTO user_liked_places (user_id, place_id, liked_at) VALUES ($1, $2, now())",
        user_id,
        place_id,
    )


async def delete_like(user_id: int, place_id: str) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM user_liked_places
        WHERE user_id = $1
          AND place_id = $2
        RETURNING id
        """,
        user_id,
        place_id,
    )
    return row is not None
