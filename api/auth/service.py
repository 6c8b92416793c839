"""
Auth business logic.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from activity import service as activity
from core import db
from core.errors import ServiceError

from . import repository, schemas, security


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        username=str(user_row.get("username") or ""),
        email=str(user_row["email"]),
        created_at=user_row.get("created_at"),
    )


async def signup(payload: schemas.SignupRequest) -> schemas.SignupResponse:
    try:
        existing = await repository.get_user_by_email(payload.email)
        if existing is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email is already registered.",
            )

        password_hash = security.hash_password(payload.password)
        user_row = await repository.create_user(
            username=payload.username,
            email=payload.email,
            password_hash=password_hash,
        )
    except db.DatabaseError as exc:
        raise ServiceError("Failed to create account", message=str(exc), status_code=400) from exc

    user = _to_user_response(user_row)
    await activity.record(user.id, activity.USER_SIGNUP, f"User {user.username} created an account")
    return schemas.SignupResponse(user=user)


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    try:
        user_row = await repository.get_user_by_email(payload.email)
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    user = _to_user_response(user_row)
    token = security.build_access_token(user_id=user.id, email=user.email)
    await activity.record(user.id, activity.USER_LOGIN, f"User {user.username} logged in")
    return schemas.LoginResponse(token=token, user=user)


async def logout(payload: schemas.LogoutRequest) -> dict:
    if payload.user_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userId is required",
        )

    await activity.record(payload.user_id, activity.USER_LOGOUT, f"User with ID {payload.user_id} logged out")
    return {"success": True, "message": "Logged out successfully"}


async def get_user_from_access_token(access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(exc),
        ) from exc

    try:
        user_row = await repository.get_user_by_id(int(payload["sub"]))
    except db.DatabaseError as exc:
        raise ServiceError("Server error", message=str(exc)) from exc

    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found.",
        )
    return user_row
