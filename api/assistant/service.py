"""
Travel assistant orchestration.

Flow:
1) Build a single-turn prompt (tourism system prompt + optional places context)
2) Ask Gemini for an answer
3) Save the exchange to the `ai` table (best-effort)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from core import db, gemini, settings
from core.errors import ServiceError
from core.pagination import PageRequest, PageResult

from . import prompts, repository

FALLBACK_ANSWER = "Sorry, I couldn't generate a response. Please try again!"
HISTORY_DEFAULT_LIMIT = 20

logger = logging.getLogger(__name__)


def gemini_api_key() -> str:
    return settings.env_str("GEMINI_API_KEY")


def gemini_model() -> str:
    return settings.env_str("GEMINI_MODEL", "gemini-2.5-flash")


def gemini_base_url() -> str:
    return settings.env_str("GEMINI_BASE_URL", gemini.DEFAULT_BASE_URL)


def gemini_timeout_s() -> float:
    return settings.env_float("GEMINI_TIMEOUT_S", 60.0)


def gemini_temperature() -> float:
    return settings.env_float("GEMINI_TEMPERATURE", 0.7)


def gemini_max_output_tokens() -> int:
    return settings.env_int("GEMINI_MAX_OUTPUT_TOKENS", 1000)


async def chat(message: str, *, user_id: int, places_context: str | None = None) -> dict[str, Any]:
    message = (message or "").strip()
    if not message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    api_key = gemini_api_key()
    if not api_key:
        raise ServiceError("GEMINI_API_KEY not configured")

    try:
        answer = await gemini.generate_text(
            api_key=api_key,
            model=gemini_model(),
            prompt=prompts.chat_prompt(message, places_context),
            base_url=gemini_base_url(),
            timeout_s=gemini_timeout_s(),
            temperature=gemini_temperature(),
            max_output_tokens=gemini_max_output_tokens(),
        )
    except gemini.GeminiError as exc:
        raise ServiceError("Failed to get AI response", message=str(exc), status_code=502) from exc

    answer = answer or FALLBACK_ANSWER

    # Losing the history row must not lose the answer.
    try:
        await repository.insert_chat(user_id, prompt=message, response=answer)
    except db.DatabaseError:
        logger.exception("assistant_history_save_failed user_id=%s", user_id)

    return {"success": True, "response": answer}


async def history(user_id: int, *, page: object = None, limit: object = None) -> dict[str, Any]:
    request = PageRequest.parse(page, limit, default_limit=HISTORY_DEFAULT_LIMIT)
    try:
        total = await repository.count_chats(user_id)
        rows = await repository.list_chats(user_id, limit=request.limit, offset=request.offset)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    result = PageResult.build(rows, total_records=total, request=request)
    return {
        "success": True,
        "chats": result.rows,
        "pagination": {
            "page": result.current_page,
            "limit": result.limit,
            "totalChats": result.total_records,
            "totalPages": result.total_pages,
        },
    }


async def delete_chat(chat_id: int, *, user_id: int) -> dict[str, Any]:
    try:
        deleted = await repository.delete_chat(chat_id, user_id=user_id)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found or unauthorized")
    return {"success": True, "message": "Chat deleted successfully"}
