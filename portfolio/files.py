"""
Storage abstraction for uploaded files: a local directory and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol
import os

from portfolio.errors import NotFoundError, StorageError


class FileStorage(Protocol):
    """Defines the operations the API needs from file storage."""

    def write(self, name: str, data: bytes) -> None:
        ...

    def read(self, name: str) -> bytes:
        ...

    def delete(self, name: str) -> None:
        ...

    def list_names(self) -> list[str]:
        ...


def is_safe_name(name: str) -> bool:
    """True when `name` is a plain filename with no directory component."""
    if not name or name in (".", ".."):
        return False
    return not any(sep in name for sep in ("/", "\\", "\0"))


@dataclass
class InMemoryFileStorage:
    """Test double for file storage."""

    files: dict[str, bytes] = field(default_factory=dict)

    def write(self, name: str, data: bytes) -> None:
        self.files[name] = bytes(data)

    def read(self, name: str) -> bytes:
        stored = self.files.get(name)
        if stored is None:
            raise NotFoundError(name)
        return stored

    def delete(self, name: str) -> None:
        if name not in self.files:
            raise NotFoundError(name)
        del self.files[name]

    def list_names(self) -> list[str]:
        return list(self.files)


class LocalFileStorage:
    """
    Files kept flat in a single directory, which is created if missing.
    """

    def __init__(self, root: str):
        self.root = root
        try:
            os.makedirs(root, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create {root}: {exc}") from exc

    def _path(self, name: str) -> str:
        if not is_safe_name(name):
            raise NotFoundError(name)
        return os.path.join(self.root, name)

    def write(self, name: str, data: bytes) -> None:
        path = self._path(name)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as exc:
            raise StorageError(f"Cannot write {path}: {exc}") from exc

    def read(self, name: str) -> bytes:
        path = self._path(name)
        try:
            with open(path, "rb") as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise NotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"Cannot read {path}: {exc}") from exc

    def delete(self, name: str) -> None:
        path = self._path(name)
        try:
            os.unlink(path)
        except FileNotFoundError as exc:
            raise NotFoundError(name) from exc
        except OSError as exc:
            raise StorageError(f"Cannot delete {path}: {exc}") from exc

    def list_names(self) -> list[str]:
        try:
            return os.listdir(self.root)
        except OSError as exc:
            raise StorageError(f"Cannot list {self.root}: {exc}") from exc
