"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
import os

from fastapi import Depends

from portfolio.config import get_settings
from portfolio.contact import ContactRelay, InMemoryMailSender, MailSender, SmtpMailSender
from portfolio.files import FileStorage, InMemoryFileStorage, LocalFileStorage
from portfolio.media import METADATA_FILENAME, PROFILE_FILENAME, MediaLibrary
from portfolio.profile import ProfileService
from portfolio.store import DocumentStore, InMemoryStore, JsonFileStore

logger = logging.getLogger(__name__)

_file_storage: FileStorage | None = None
_metadata_store: DocumentStore | None = None
_profile_store: DocumentStore | None = None
_mail_sender: MailSender | None = None


def get_file_storage() -> FileStorage:
    """
    Return a singleton file storage rooted at the upload directory.
    """
    global _file_storage
    if _file_storage:
        return _file_storage

    settings = get_settings()
    if settings.use_in_memory_backends:
        _file_storage = InMemoryFileStorage()
    else:
        _file_storage = LocalFileStorage(settings.upload_dir)
    return _file_storage


def get_metadata_store() -> DocumentStore:
    global _metadata_store
    if _metadata_store:
        return _metadata_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _metadata_store = InMemoryStore(document={})
    else:
        _metadata_store = JsonFileStore(
            os.path.join(settings.upload_dir, METADATA_FILENAME), initialize=True
        )
    return _metadata_store


def get_profile_store() -> DocumentStore:
    global _profile_store
    if _profile_store:
        return _profile_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _profile_store = InMemoryStore()
    else:
        _profile_store = JsonFileStore(
            os.path.join(settings.upload_dir, PROFILE_FILENAME)
        )
    return _profile_store


def get_mail_sender() -> MailSender:
    """
    Return the SMTP sender, or an in-memory one when no account is configured.
    """
    global _mail_sender
    if _mail_sender:
        return _mail_sender

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.mail_user:
        if not settings.use_in_memory_backends:
            logger.warning("MAIL_USER is not set; contact messages will not be delivered")
        _mail_sender = InMemoryMailSender()
    else:
        _mail_sender = SmtpMailSender(
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.mail_user,
            password=settings.mail_pass,
            timeout=settings.smtp_timeout,
        )
    return _mail_sender


def get_media_library(
    files: FileStorage = Depends(get_file_storage),
    metadata: DocumentStore = Depends(get_metadata_store),
) -> MediaLibrary:
    return MediaLibrary(files=files, metadata=metadata)


def get_profile_service(
    store: DocumentStore = Depends(get_profile_store),
    media: MediaLibrary = Depends(get_media_library),
) -> ProfileService:
    return ProfileService(store=store, media=media)


def get_contact_relay(
    sender: MailSender = Depends(get_mail_sender),
) -> ContactRelay:
    settings = get_settings()
    from_address = settings.mail_user or "portfolio@localhost"
    return ContactRelay(
        sender=sender,
        from_address=from_address,
        recipient=settings.contact_recipient or from_address,
    )
