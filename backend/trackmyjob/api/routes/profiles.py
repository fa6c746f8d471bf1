"""
Profile API Routes - The caller's own profile and avatar
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from trackmyjob.config import settings
from trackmyjob.database import get_db
from trackmyjob.exceptions import StorageError, UploadValidationError
from trackmyjob.models.profile import Profile
from trackmyjob.models.user_file import FileKind
from trackmyjob.schemas.profile import ProfileCreate, ProfileUpdate, ProfileResponse
from trackmyjob.services.auth import AuthenticatedUser
from trackmyjob.services.files import AVATAR_MIME_TYPES, FileService
from trackmyjob.api.dependencies import get_current_user, get_file_service
from trackmyjob.api.helpers import (
    find_owned_file,
    get_profile_or_404,
    storage_http_error,
    upload_http_error,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await get_profile_or_404(db, user.id)
    return ProfileResponse.model_validate(profile)


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile_data: ProfileCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Register the caller's profile. Each user has exactly one."""
    existing = await db.get(Profile, user.id)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Profile already exists",
        )

    display_name = profile_data.display_name
    if display_name is None:
        display_name = user.metadata.get("full_name") or user.metadata.get("display_name")

    profile = Profile(id=user.id, display_name=display_name)
    db.add(profile)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent registration won the insert
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Profile already exists",
        )
    await db.refresh(profile)

    logger.info(f"Created profile for user {user.id}")
    return ProfileResponse.model_validate(profile)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await get_profile_or_404(db, user.id)

    update_data = profile_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(profile, field, value)

    await db.flush()
    await db.refresh(profile)

    return ProfileResponse.model_validate(profile)


@router.post("/avatar", response_model=ProfileResponse)
async def upload_avatar(
    file: UploadFile = File(...),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    file_service: FileService = Depends(get_file_service),
):
    """Upload a new avatar, replacing the previous one."""
    profile = await get_profile_or_404(db, user.id)

    try:
        user_file = await file_service.upload(
            db,
            user.id,
            file,
            FileKind.AVATAR,
            AVATAR_MIME_TYPES,
            settings.max_avatar_bytes,
        )
        previous = await find_owned_file(db, user.id, profile.avatar_file_id)
        if previous:
            await file_service.remove(db, previous)
    except UploadValidationError as e:
        raise upload_http_error(e)
    except StorageError as e:
        raise storage_http_error(e)

    profile.avatar_file_id = user_file.id
    profile.avatar_url = user_file.url
    await db.flush()
    await db.refresh(profile)

    return ProfileResponse.model_validate(profile)


@router.delete("/avatar", response_model=ProfileResponse)
async def delete_avatar(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    file_service: FileService = Depends(get_file_service),
):
    profile = await get_profile_or_404(db, user.id)

    if not profile.avatar_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No avatar to delete",
        )

    avatar = await find_owned_file(db, user.id, profile.avatar_file_id)
    if avatar:
        await file_service.remove(db, avatar)

    profile.avatar_file_id = None
    profile.avatar_url = None
    await db.flush()
    await db.refresh(profile)

    return ProfileResponse.model_validate(profile)
