"""
User profile and favorites logic.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from activity import service as activity
from core import db
from core.errors import ServiceError
from places import repository as places_repository

from . import repository, schemas


def _profile_body(row: dict[str, Any]) -> dict[str, Any]:
    # `name`, `phone` and `bio` keep the shape the web client renders.
    return {
        "id": row["id"],
        "name": row["username"],
        "username": row["username"],
        "email": row["email"],
        "phone": None,
        "bio": None,
        "created_at": row.get("created_at"),
    }


async def get_profile(user_id: int) -> dict[str, Any]:
    try:
        row = await repository.get_profile(user_id)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"success": True, "user": _profile_body(row)}


async def update_profile(user_id: int, payload: schemas.UpdateProfileRequest) -> dict[str, Any]:
    name = payload.name.strip()
    email = payload.email.strip()
    if not name or not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name and email are required")

    try:
        if await repository.email_taken_by_other(email, user_id=user_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")
        row = await repository.update_profile(user_id, username=name, email=email)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    await activity.record(user_id, activity.PROFILE_UPDATE, f"User {row['username']} updated their profile")
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": _profile_body(row),
    }


async def liked_places(user_id: int) -> dict[str, Any]:
    try:
        rows = await repository.list_liked_places(user_id)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc
    return {"success": True, "places": rows}


async def like_place(user_id: int, payload: schemas.LikePlaceRequest) -> dict[str, Any]:
    place_id = str(payload.place_id if payload.place_id is not None else "").strip()
    if not place_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Place ID is required")

    try:
        if not await places_repository.place_exists(place_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place not found")
        if await repository.is_liked(user_id, place_id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Place already in favorites")
        await repository.insert_like(user_id, place_id)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    await activity.record(user_id, activity.PLACE_LIKED, f"User liked a place (ID: {place_id})")
    return {"success": True, "message": "Place added to favorites"}


async def unlike_place(user_id: int, place_id: str) -> dict[str, Any]:
    try:
        removed = await repository.delete_like(user_id, place_id)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place not in favorites")

    await activity.record(user_id, activity.PLACE_UNLIKED, f"User removed a place from favorites (ID: {place_id})")
    return {"success": True, "message": "Place removed from favorites"}
