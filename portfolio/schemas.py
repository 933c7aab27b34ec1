"""
Pydantic schemas for the portfolio backend.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class MediaEntry(BaseModel):
    tags: list[str] = Field(default_factory=list)
    link: str = ""


class ProfileLinks(BaseModel):
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    email: Optional[str] = None


class ProfileFields(BaseModel):
    """Free-form profile fields submitted with a profile save."""

    name: Optional[str] = None
    bio: Optional[str] = None
    links: ProfileLinks = Field(default_factory=ProfileLinks)


class Profile(ProfileFields):
    avatar: Optional[str] = None
    avatar_history: list[str] = Field(default_factory=list)


class PingResponse(BaseModel):
    message: str


class UploadResponse(BaseModel):
    message: str
    file: str


class MediaListResponse(BaseModel):
    files: list[str]


class DeleteResponse(BaseModel):
    success: bool


class SuccessResponse(BaseModel):
    success: Literal[True] = True


class ContactResponse(BaseModel):
    success: bool
    message: Optional[str] = None
