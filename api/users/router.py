"""
User API endpoints (all require a bearer token).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from activity import service as activity
from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter(prefix="/api/users")


@router.get("/profile")
async def get_profile(current_user: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    return await service.get_profile(int(current_user["id"]))


@router.put("/profile")
async def update_profile(
    payload: schemas.UpdateProfileRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.update_profile(int(current_user["id"]), payload)


@router.get("/logs")
async def list_logs(
    page: str | None = None,
    limit: str | None = None,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await activity.list_for_user(int(current_user["id"]), page=page, limit=limit)


@router.get("/liked-places")
async def liked_places(current_user: dict = Depends(auth_dependencies.get_current_user)) -> dict:
    return await service.liked_places(int(current_user["id"]))


@router.post("/liked-places")
async def like_place(
    payload: schemas.LikePlaceRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.like_place(int(current_user["id"]), payload)


@router.delete("/liked-places/{place_id}")
async def unlike_place(
    place_id: str,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.unlike_place(int(current_user["id"]), place_id)
