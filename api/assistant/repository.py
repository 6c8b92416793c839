"""
Assistant chat history persistence (`ai` table).
"""

from __future__ import annotations

from typing import Any

from core import db


async def insert_chat(user_id: int, *, prompt: str, response: str) -> None:
    await db.execute(
        """
        INSERT INTO ai (user_id, prompt, response, created_at)
        VALUES ($1, $2, $3, now())
        """,
        user_id,
        prompt,
        response,
    )


async def count_chats(user_id: int) -> int:
    row = await db.fetch_one("SELECT COUNT(*) AS total FROM ai WHERE user_id = $1", user_id)
    return int((row or {}).get("total") or 0)


async def list_chats(user_id: int, *, limit: int, offset: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, prompt, response, created_at
        FROM ai
        WHERE user_id = $1
        ORDER BY created_at DESC, id DESC
        LIMIT $2
        OFFSET $3
        """,
        user_id,
        limit,
        offset,
    )


async def delete_chat(chat_id: int, *, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM ai
        WHERE id = $1
          AND user_id = $2
        RETURNING id
        """,
        chat_id,
        user_id,
    )
    return row is not None
