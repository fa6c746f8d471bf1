from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trackmyjob.exceptions import StorageError, UploadValidationError
from trackmyjob.models.profile import Profile
from trackmyjob.models.job import JobApplication
from trackmyjob.models.user_file import UserFile


# Every lookup is scoped to the owner: another user's row is reported as missing.

async def get_profile_or_404(db: AsyncSession, user_id: str) -> Profile:
    profile = await db.get(Profile, user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


async def get_application_or_404(db: AsyncSession, user_id: str, application_id: str) -> JobApplication:
    application = await db.scalar(
        select(JobApplication).where(
            JobApplication.id == application_id,
            JobApplication.user_id == user_id,
        )
    )
    if not application:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )
    return application


async def get_file_or_404(db: AsyncSession, user_id: str, file_id: str) -> UserFile:
    user_file = await db.scalar(
        select(UserFile).where(
            UserFile.id == file_id,
            UserFile.user_id == user_id,
        )
    )
    if not user_file:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found",
        )
    return user_file


async def find_owned_file(db: AsyncSession, user_id: str, file_id: str | None) -> UserFile | None:
    if not file_id:
        return None
    return await db.scalar(
        select(UserFile).where(
            UserFile.id == file_id,
            UserFile.user_id == user_id,
        )
    )


def upload_http_error(exc: UploadValidationError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


def storage_http_error(exc: StorageError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="File storage error",
    )
