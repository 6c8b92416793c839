"""
Pydantic schemas for user endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    name: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=320)


class LikePlaceRequest(BaseModel):
    place_id: str | int | None = Field(default=None, alias="placeId")
