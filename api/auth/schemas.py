"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class LogoutRequest(BaseModel):
    user_id: int | None = Field(default=None, alias="userId")


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime | None = None


class SignupResponse(BaseModel):
    success: bool = True
    user: UserResponse


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserResponse
