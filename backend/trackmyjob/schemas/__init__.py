"""
Pydantic Schemas Package
"""

from trackmyjob.schemas.profile import ProfileCreate, ProfileUpdate, ProfileResponse
from trackmyjob.schemas.job import (
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationStatusUpdate,
    ApplicationResponse,
    ApplicationListResponse,
)
from trackmyjob.schemas.user_file import UserFileResponse, UserFileListResponse

__all__ = [
    "ProfileCreate",
    "ProfileUpdate",
    "ProfileResponse",
    "ApplicationCreate",
    "ApplicationUpdate",
    "ApplicationStatusUpdate",
    "ApplicationResponse",
    "ApplicationListResponse",
    "UserFileResponse",
    "UserFileListResponse",
]
