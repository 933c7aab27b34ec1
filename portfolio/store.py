"""
JSON document storage for the media metadata and profile records.

Each document is read and replaced as a whole. `locked()` serializes a
load-mutate-save cycle within this process; separate processes writing the
same file still race with last-write-wins.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Protocol
import json
import logging
import os
import tempfile
import threading

from portfolio.errors import ParseError, StorageError

logger = logging.getLogger(__name__)

_locks: dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(key: str) -> threading.RLock:
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class DocumentStore(Protocol):
    """Defines the operations handlers need from a JSON document."""

    def load(self) -> dict:
        ...

    def save(self, document: dict) -> None:
        ...

    def locked(self) -> AbstractContextManager:
        ...


def _decode(raw: str, source: str) -> dict:
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Malformed JSON in {source}: {exc}") from exc
    if not isinstance(document, dict):
        raise ParseError(f"Expected a JSON object in {source}")
    return document


class JsonFileStore:
    """
    Document stored as a single JSON file.

    A missing file loads as an empty mapping. With `initialize=True` the
    file is created holding `{}` when absent.
    """

    def __init__(self, path: str, initialize: bool = False):
        self.path = path
        directory = os.path.dirname(path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            if initialize and not os.path.exists(path):
                self.save({})
        except OSError as exc:
            raise StorageError(f"Cannot prepare {path}: {exc}") from exc
        self._lock = _lock_for(os.path.realpath(path))

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        return _decode(raw, self.path)

    def save(self, document: dict) -> None:
        body = json.dumps(document, indent=2, ensure_ascii=False)
        directory = os.path.dirname(self.path) or "."
        tmp_path = None
        try:
            # Replace atomically so readers never see a partial document.
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=".tmp-",
                suffix=".json",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(body)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def locked(self) -> AbstractContextManager:
        return self._lock


@dataclass
class InMemoryStore:
    """Test double for a JSON document."""

    document: dict | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def load(self) -> dict:
        if self.document is None:
            return {}
        # Round-trip through JSON to mimic the file-backed behavior.
        return json.loads(json.dumps(self.document))

    def save(self, document: dict) -> None:
        self.document = json.loads(json.dumps(document))

    def locked(self) -> AbstractContextManager:
        return self._lock
