"""
Upload validation and the UserFile lifecycle.

Stored objects and database rows change together: objects written during a
request are tracked so they can be discarded if the request fails, and
objects of removed rows are only unlinked once the transaction has
committed.
"""

import logging
from typing import Iterable, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from trackmyjob.exceptions import EmptyFileError, FileTooLargeError, StorageError, UnsupportedFileTypeError
from trackmyjob.models.user_file import FileKind, UserFile
from trackmyjob.services.storage import LocalStorage
from trackmyjob.utils import generate_uuid, safe_filename

logger = logging.getLogger(__name__)


RESUME_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
})

AVATAR_MIME_TYPES = frozenset({
    "image/png",
    "image/jpeg",
    "image/webp",
    "image/gif",
})

ATTACHMENT_MIME_TYPES = RESUME_MIME_TYPES | AVATAR_MIME_TYPES

DOWNLOAD_URL = "/api/files/{file_id}/download"


def validate_upload(
    content_type: Optional[str],
    size: int,
    allowed_types: Iterable[str],
    max_bytes: int,
) -> None:
    allowed = frozenset(allowed_types)
    if size <= 0:
        raise EmptyFileError()
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in allowed:
        raise UnsupportedFileTypeError(content_type, allowed)
    if size > max_bytes:
        raise FileTooLargeError(size, max_bytes)


class FileService:
    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._written: list[str] = []
        self._removed: list[str] = []

    async def upload(
        self,
        db: AsyncSession,
        user_id: str,
        upload: UploadFile,
        kind: FileKind,
        allowed_types: Iterable[str],
        max_bytes: int,
    ) -> UserFile:
        """Validate, store and record an uploaded file."""
        # Read at most one byte past the ceiling so oversized uploads are rejected
        # without buffering the whole body
        content = await upload.read(max_bytes + 1)
        size = upload.size if upload.size is not None else len(content)
        validate_upload(upload.content_type, max(size, len(content)), allowed_types, max_bytes)

        file_name = safe_filename(upload.filename or "", default=f"{kind.value}")
        stored = self.storage.save(user_id, kind.value, file_name, content)
        self._written.append(stored.storage_path)

        file_id = generate_uuid()
        user_file = UserFile(
            id=file_id,
            user_id=user_id,
            file_name=file_name,
            url=stored.url or DOWNLOAD_URL.format(file_id=file_id),
            storage_path=stored.storage_path,
            mime_type=(upload.content_type or "").split(";")[0].strip().lower(),
            size=stored.size,
            kind=kind.value,
        )
        db.add(user_file)
        await db.flush()
        await db.refresh(user_file)

        logger.info(f"Uploaded {kind.value} file {user_file.id} for user {user_id} ({stored.size} bytes)")
        return user_file

    async def remove(self, db: AsyncSession, user_file: UserFile) -> None:
        """Delete the row now; the object goes once the transaction commits."""
        await db.delete(user_file)
        await db.flush()
        self._removed.append(user_file.storage_path)
        logger.info(f"Deleted file {user_file.id} for user {user_file.user_id}")

    def discard_written(self) -> None:
        """Drop objects written by a request that did not commit."""
        for storage_path in self._written:
            try:
                self.storage.delete(storage_path)
            except StorageError as e:
                logger.error(f"Could not discard {storage_path}: {e}")
            else:
                logger.debug(f"Discarded uncommitted object {storage_path}")
        self._written.clear()
        self._removed.clear()

    def purge_removed(self) -> None:
        """Unlink objects whose rows were deleted in a committed transaction."""
        for storage_path in self._removed:
            try:
                if not self.storage.delete(storage_path):
                    logger.warning(f"Object {storage_path} was already missing")
            except StorageError as e:
                logger.error(f"Orphaned object left in storage: {storage_path}: {e}")
        self._written.clear()
        self._removed.clear()
