"""
File API Routes - The caller's uploaded attachments
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from trackmyjob.config import settings
from trackmyjob.database import get_db
from trackmyjob.exceptions import StorageError, UploadValidationError
from trackmyjob.models.job import JobApplication
from trackmyjob.models.profile import Profile
from trackmyjob.models.user_file import FileKind, UserFile
from trackmyjob.schemas.user_file import UserFileResponse, UserFileListResponse
from trackmyjob.services.auth import AuthenticatedUser
from trackmyjob.services.files import ATTACHMENT_MIME_TYPES, FileService
from trackmyjob.services.storage import LocalStorage, get_storage
from trackmyjob.api.dependencies import get_current_user, get_file_service
from trackmyjob.api.helpers import get_file_or_404, storage_http_error, upload_http_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=UserFileListResponse)
async def list_files(
    kind: Optional[FileKind] = None,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(UserFile).where(UserFile.user_id == user.id)
    if kind:
        query = query.where(UserFile.kind == kind.value)
    query = query.order_by(UserFile.created_at.desc())

    result = await db.execute(query)
    files = result.scalars().all()

    return UserFileListResponse(
        files=[UserFileResponse.model_validate(f) for f in files],
        total=len(files),
    )


@router.post("", response_model=UserFileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    kind: FileKind = Form(FileKind.OTHER),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    file_service: FileService = Depends(get_file_service),
):
    try:
        user_file = await file_service.upload(
            db,
            user.id,
            file,
            kind,
            ATTACHMENT_MIME_TYPES,
            settings.max_upload_bytes,
        )
    except UploadValidationError as e:
        raise upload_http_error(e)
    except StorageError as e:
        raise storage_http_error(e)

    return UserFileResponse.model_validate(user_file)


@router.get("/{file_id}", response_model=UserFileResponse)
async def get_file(
    file_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user_file = await get_file_or_404(db, user.id, file_id)
    return UserFileResponse.model_validate(user_file)


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
):
    user_file = await get_file_or_404(db, user.id, file_id)

    try:
        path = storage.resolve(user_file.storage_path)
    except StorageError as e:
        raise storage_http_error(e)

    if not path.is_file():
        logger.error(f"Stored object missing for file {file_id}: {user_file.storage_path}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Stored file not found",
        )

    return FileResponse(
        path=path,
        media_type=user_file.mime_type,
        filename=user_file.file_name,
    )


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    file_service: FileService = Depends(get_file_service),
):
    user_file = await get_file_or_404(db, user.id, file_id)

    # Clear references so no row points at a removed object
    await db.execute(
        update(Profile)
        .where(Profile.id == user.id, Profile.avatar_file_id == file_id)
        .values(avatar_file_id=None, avatar_url=None)
    )
    await db.execute(
        update(JobApplication)
        .where(JobApplication.user_id == user.id, JobApplication.resume_file_id == file_id)
        .values(resume_file_id=None, resume_url=None)
    )

    await file_service.remove(db, user_file)
