"""
Services module.

Contains:
- Auth client that verifies bearer tokens against the managed auth service
- Local object storage for uploaded files
- Upload validation and the file service tying storage to UserFile rows
"""

from trackmyjob.services.auth import AuthClient, AuthenticatedUser, extract_bearer_token
from trackmyjob.services.storage import LocalStorage, StoredObject
from trackmyjob.services.files import (
    AVATAR_MIME_TYPES,
    RESUME_MIME_TYPES,
    FileService,
    validate_upload,
)

__all__ = [
    "AuthClient",
    "AuthenticatedUser",
    "extract_bearer_token",
    "LocalStorage",
    "StoredObject",
    "FileService",
    "validate_upload",
    "RESUME_MIME_TYPES",
    "AVATAR_MIME_TYPES",
]
