"""
HTTP routes for the portfolio backend.
"""

from __future__ import annotations

import logging
import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from portfolio.contact import ContactRelay
from portfolio.dependencies import (
    get_contact_relay,
    get_media_library,
    get_profile_service,
)
from portfolio.errors import NotFoundError, StorageError
from portfolio.media import MediaLibrary
from portfolio.profile import ProfileService
from portfolio.schemas import (
    ContactResponse,
    DeleteResponse,
    MediaEntry,
    MediaListResponse,
    PingResponse,
    ProfileFields,
    ProfileLinks,
    SuccessResponse,
    UploadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ping", response_model=PingResponse)
def ping():
    return PingResponse(message="pong")


@router.post("/upload", response_model=UploadResponse)
async def upload_media(
    file: Optional[UploadFile] = File(None),
    tags: Optional[str] = Form(None),
    link: Optional[str] = Form(None),
    media: MediaLibrary = Depends(get_media_library),
):
    """
    Store one file and record its tags and link in the metadata document.
    """
    data = await file.read() if file is not None else None
    name = await run_in_threadpool(
        media.upload,
        file.filename if file is not None else None,
        data,
        tags=tags,
        link=link,
    )
    return UploadResponse(message="File uploaded successfully", file=name)


@router.get("/media", response_model=MediaListResponse)
def list_media(media: MediaLibrary = Depends(get_media_library)):
    return MediaListResponse(files=media.list_files())


@router.get("/metadata", response_model=dict[str, MediaEntry])
def get_metadata(media: MediaLibrary = Depends(get_media_library)):
    return media.entries()


@router.delete("/delete/{filename}", response_model=DeleteResponse)
def delete_media(filename: str, media: MediaLibrary = Depends(get_media_library)):
    try:
        media.delete(filename)
    except (NotFoundError, StorageError) as exc:
        # Missing files and filesystem errors both report a plain failure.
        logger.warning("Delete of %s failed: %s", filename, exc)
        return JSONResponse(status_code=500, content={"success": False})
    return DeleteResponse(success=True)


@router.get("/uploads/{filename}")
def get_upload(filename: str, media: MediaLibrary = Depends(get_media_library)):
    data = media.read(filename)
    media_type, _ = mimetypes.guess_type(filename)
    return Response(content=data, media_type=media_type or "application/octet-stream")


@router.get("/profile")
def get_profile(profiles: ProfileService = Depends(get_profile_service)) -> dict:
    return profiles.get()


@router.post("/profile", response_model=SuccessResponse)
async def save_profile(
    name: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    instagram: Optional[str] = Form(None),
    linkedin: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    profiles: ProfileService = Depends(get_profile_service),
):
    fields = ProfileFields(
        name=name,
        bio=bio,
        links=ProfileLinks(instagram=instagram, linkedin=linkedin, email=email),
    )
    # Browsers send an empty part when no avatar was picked.
    if avatar is not None and avatar.filename:
        data = await avatar.read()
        await run_in_threadpool(
            profiles.save, fields, avatar_name=avatar.filename, avatar_data=data
        )
    else:
        await run_in_threadpool(profiles.save, fields)
    return SuccessResponse()


@router.post(
    "/contact", response_model=ContactResponse, response_model_exclude_none=True
)
async def contact(request: Request, relay: ContactRelay = Depends(get_contact_relay)):
    # Missing or non-JSON bodies reach the relay as empty so it reports 400.
    try:
        payload = await request.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    await relay.send(payload.get("name"), payload.get("email"), payload.get("message"))
    return ContactResponse(success=True)
