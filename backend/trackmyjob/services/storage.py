"""
Local object storage.

Objects are laid out as ``<folder>/<user_id>/<uuid><ext>`` under the storage
root. Only folders listed in ``PUBLIC_FOLDERS`` are served as static files;
everything else is reachable through the authenticated download route. The
storage path doubles as the object identifier recorded on the UserFile row.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from trackmyjob.config import settings
from trackmyjob.exceptions import StorageError

logger = logging.getLogger(__name__)

PUBLIC_FOLDERS = frozenset({"avatar"})


@dataclass
class StoredObject:
    storage_path: str
    size: int
    url: Optional[str] = None  # set for public folders only


class LocalStorage:
    def __init__(self, root: Optional[str | Path] = None, public_url: Optional[str] = None):
        self.root = Path(root or settings.storage_path).resolve()
        self.public_url = (public_url if public_url is not None else settings.storage_public_url).rstrip("/")

    def resolve(self, storage_path: str) -> Path:
        path = (self.root / storage_path).resolve()
        if path != self.root and self.root not in path.parents:
            raise StorageError(f"Path escapes storage root: {storage_path}")
        return path

    def url_for(self, storage_path: str) -> str:
        return f"{self.public_url}/{storage_path}"

    def is_public(self, folder: str) -> bool:
        return folder in PUBLIC_FOLDERS

    def save(self, user_id: str, folder: str, filename: str, content: bytes) -> StoredObject:
        ext = Path(filename or "").suffix.lower()
        storage_path = f"{folder}/{user_id}/{uuid.uuid4().hex}{ext}"
        path = self.resolve(storage_path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Failed to write {storage_path}: {e}")
            raise StorageError(f"Failed to store file: {e}") from e

        logger.debug(f"Stored {len(content)} bytes at {storage_path}")
        url = self.url_for(storage_path) if self.is_public(folder) else None
        return StoredObject(storage_path=storage_path, size=len(content), url=url)

    def delete(self, storage_path: str) -> bool:
        """Remove an object. Returns False if it was already gone."""
        path = self.resolve(storage_path)
        if not path.exists():
            return False
        try:
            os.remove(path)
        except OSError as e:
            logger.error(f"Failed to delete {storage_path}: {e}")
            raise StorageError(f"Failed to delete file: {e}") from e
        return True

    def exists(self, storage_path: str) -> bool:
        return self.resolve(storage_path).is_file()


_storage: Optional[LocalStorage] = None


def get_storage() -> LocalStorage:
    global _storage
    if _storage is None:
        _storage = LocalStorage()
    return _storage
