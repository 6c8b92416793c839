"""
User activity log persistence (`user_logs`).
"""

from __future__ import annotations

from typing import Any

from core import db


async def insert_log(user_id: int, *, action: str, description: str | None = None) -> None:
    await db.execute(
        """
        INSERT INTO user_logs (user_id, action, description, created_at)
        VALUES ($1, $2, $3, now())
        """,
        user_id,
        action,
        description,
    )


async def count_logs(user_id: int) -> int:
    row = await db.fetch_one(
        "SELECT COUNT(*) AS total FROM user_logs WHERE user_id = $1",
        user_id,
    )
    return int((row or {}).get("total") or 0)


async def list_logs(user_id: int, *, limit: int, offset: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, user_id, action, description, created_at
        FROM user_logs
        WHERE user_id = $1
        ORDER BY created_at DESC, id DESC
        LIMIT $2
        OFFSET $3
        """,
        user_id,
        limit,
        offset,
    )
