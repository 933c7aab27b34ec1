"""
Upload, listing and deletion of media files and their tag/link metadata.
"""

from __future__ import annotations

import logging
import os
import time
from uuid import uuid4

from portfolio.errors import NotFoundError, ValidationError
from portfolio.files import FileStorage, is_safe_name
from portfolio.schemas import MediaEntry
from portfolio.store import DocumentStore

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"
PROFILE_FILENAME = "profile.json"
RESERVED_NAMES = frozenset({METADATA_FILENAME, PROFILE_FILENAME})


def parse_tags(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [t.strip() for t in raw.split(",")]


def make_stored_name(original: str | None) -> str:
    """
    Build `<millis>-<token>-<basename>` from a client-supplied filename.
    """
    base = os.path.basename((original or "").replace("\\", "/")).strip()
    if not is_safe_name(base):
        base = "upload"
    return f"{int(time.time() * 1000)}-{uuid4().hex[:8]}-{base}"


class MediaLibrary:
    """Uploaded files plus the metadata document that describes them."""

    def __init__(self, files: FileStorage, metadata: DocumentStore):
        self.files = files
        self.metadata = metadata

    def _check_name(self, name: str) -> None:
        if not is_safe_name(name) or name in RESERVED_NAMES:
            raise NotFoundError(name)

    def store_file(self, original_name: str | None, data: bytes) -> str:
        """Persist bytes under a freshly generated name and return it."""
        name = make_stored_name(original_name)
        self.files.write(name, data)
        return name

    def upload(
        self,
        original_name: str | None,
        data: bytes | None,
        tags: str | None = None,
        link: str | None = None,
    ) -> str:
        if data is None:
            raise ValidationError("No file provided")
        name = self.store_file(original_name, data)
        entry = MediaEntry(tags=parse_tags(tags), link=link or "")
        with self.metadata.locked():
            document = self.metadata.load()
            document[name] = entry.model_dump()
            self.metadata.save(document)
        logger.info("Stored upload %s (%d bytes, tags=%s)", name, len(data), entry.tags)
        return name

    def list_files(self) -> list[str]:
        return [
            name
            for name in self.files.list_names()
            if name not in RESERVED_NAMES and not name.startswith(".")
        ]

    def entries(self) -> dict[str, MediaEntry]:
        return {
            name: MediaEntry.model_validate(entry)
            for name, entry in self.metadata.load().items()
        }

    def read(self, name: str) -> bytes:
        self._check_name(name)
        return self.files.read(name)

    def delete(self, name: str) -> None:
        """
        Remove the file, then its metadata entry.

        A missing file raises NotFoundError before the metadata is touched.
        """
        self._check_name(name)
        with self.metadata.locked():
            self.files.delete(name)
            document = self.metadata.load()
            document.pop(name, None)
            self.metadata.save(document)
        logger.info("Deleted %s", name)
