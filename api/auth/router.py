"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter(prefix="/auth")


@router.post("/signup")
async def signup(payload: schemas.SignupRequest) -> schemas.SignupResponse:
    return await service.signup(payload)


@router.post("/login")
async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    return await service.login(payload)


@router.post("/logout")
async def logout(payload: schemas.LogoutRequest) -> dict:
    return await service.logout(payload)
