"""
User File Schemas
"""

from datetime import datetime

from pydantic import BaseModel

from trackmyjob.models.user_file import FileKind


class UserFileResponse(BaseModel):
    id: str
    user_id: str
    file_name: str
    url: str
    storage_path: str
    mime_type: str
    size: int
    kind: FileKind
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserFileListResponse(BaseModel):
    files: list[UserFileResponse]
    total: int
