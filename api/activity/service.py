"""
Activity logging for user-facing actions.

Writing a log entry is best-effort: a failed insert is logged and never
fails the request that triggered it.
"""

from __future__ import annotations

import logging
from typing import Any

from core import db
from core.errors import ServiceError
from core.pagination import PageRequest, PageResult

from . import repository

USER_SIGNUP = "USER_SIGNUP"
USER_LOGIN = "USER_LOGIN"
USER_LOGOUT = "USER_LOGOUT"
PROFILE_UPDATE = "PROFILE_UPDATE"
PLACE_LIKED = "PLACE_LIKED"
PLACE_UNLIKED = "PLACE_UNLIKED"

LOGS_DEFAULT_LIMIT = 20

logger = logging.getLogger(__name__)


async def record(user_id: int, action: str, description: str | None = None) -> None:
    try:
        await repository.insert_log(user_id, action=action, description=description)
    except db.DatabaseError:
        logger.exception("activity_log_failed user_id=%s action=%s", user_id, action)


async def list_for_user(user_id: int, *, page: object = None, limit: object = None) -> dict[str, Any]:
    request = PageRequest.parse(page, limit, default_limit=LOGS_DEFAULT_LIMIT)
    try:
        total = await repository.count_logs(user_id)
        rows = await repository.list_logs(user_id, limit=request.limit, offset=request.offset)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    result = PageResult.build(rows, total_records=total, request=request)
    return {
        "success": True,
        "logs": result.rows,
        "pagination": {
            "page": result.current_page,
            "limit": result.limit,
            "totalLogs": result.total_records,
            "totalPages": result.total_pages,
        },
    }
