"""
Travel assistant API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter(prefix="/api/gemini")


class ChatRequest(BaseModel):
    message: str = Field(default="", max_length=4000)
    places_context: str | None = Field(default=None, alias="placesContext", max_length=20000)


@router.post("/chat")
async def chat(
    request: ChatRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.chat(
        request.message,
        user_id=int(current_user["id"]),
        places_context=request.places_context,
    )


@router.get("/history")
async def history(
    page: str | None = None,
    limit: str | None = None,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.history(int(current_user["id"]), page=page, limit=limit)


@router.delete("/history/{chat_id}")
async def delete_chat(
    chat_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_chat(chat_id, user_id=int(current_user["id"]))
