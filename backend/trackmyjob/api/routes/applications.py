"""
Job Application API Routes
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from trackmyjob.config import settings
from trackmyjob.database import get_db
from trackmyjob.exceptions import StorageError, UploadValidationError
from trackmyjob.models.job import ApplicationStatus, JobApplication
from trackmyjob.models.user_file import FileKind
from trackmyjob.schemas.job import (
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationStatusUpdate,
    ApplicationResponse,
    ApplicationListResponse,
)
from trackmyjob.services.auth import AuthenticatedUser
from trackmyjob.services.files import RESUME_MIME_TYPES, FileService
from trackmyjob.api.dependencies import get_current_user, get_file_service
from trackmyjob.utils import escape_like
from trackmyjob.api.helpers import (
    find_owned_file,
    get_application_or_404,
    storage_http_error,
    upload_http_error,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Columns that may not be cleared once set
_REQUIRED_FIELDS = {"company_name", "position", "status", "applied_date"}


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    status_filter: Optional[list[ApplicationStatus]] = Query(None, alias="status"),
    q: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's job applications with filtering and pagination."""
    conditions = [JobApplication.user_id == user.id]
    if status_filter:
        conditions.append(JobApplication.status.in_([s.value for s in status_filter]))
    if q and q.strip():
        pattern = f"%{escape_like(q.strip().lower())}%"
        conditions.append(
            or_(
                func.lower(JobApplication.company_name).like(pattern, escape="\\"),
                func.lower(JobApplication.position).like(pattern, escape="\\"),
            )
        )

    total = await db.scalar(select(func.count(JobApplication.id)).where(*conditions)) or 0

    query = (
        select(JobApplication)
        .where(*conditions)
        .order_by(
            JobApplication.applied_date.desc(),
            JobApplication.created_at.desc(),
        )
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    applications = result.scalars().all()

    return ApplicationListResponse(
        applications=[ApplicationResponse.model_validate(a) for a in applications],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=(total + page_size - 1) // page_size,
    )


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    application_data: ApplicationCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = application_data.model_dump(exclude_none=True)
    data["status"] = application_data.status.value

    application = JobApplication(user_id=user.id, **data)
    db.add(application)
    await db.flush()
    await db.refresh(application)

    logger.info(f"Created application {application.id} for user {user.id}")
    return ApplicationResponse.model_validate(application)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    application = await get_application_or_404(db, user.id, application_id)
    return ApplicationResponse.model_validate(application)


@router.put("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    application_data: ApplicationUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    application = await get_application_or_404(db, user.id, application_id)

    update_data = application_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        if field == "status":
            value = value.value
        setattr(application, field, value)

    await db.flush()
    await db.refresh(application)

    return ApplicationResponse.model_validate(application)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    status_data: ApplicationStatusUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Change the status column only. Any status may follow any other."""
    application = await get_application_or_404(db, user.id, application_id)

    application.status = status_data.status.value
    await db.flush()
    await db.refresh(application)

    return ApplicationResponse.model_validate(application)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    file_service: FileService = Depends(get_file_service),
):
    application = await get_application_or_404(db, user.id, application_id)

    resume = await find_owned_file(db, user.id, application.resume_file_id)
    if resume:
        await file_service.remove(db, resume)

    await db.delete(application)
    logger.info(f"Deleted application {application_id} for user {user.id}")


@router.post("/{application_id}/resume", response_model=ApplicationResponse)
async def upload_resume(
    application_id: str,
    file: UploadFile = File(...),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    file_service: FileService = Depends(get_file_service),
):
    """Attach a resume to an application, replacing any previous one."""
    application = await get_application_or_404(db, user.id, application_id)

    try:
        user_file = await file_service.upload(
            db,
            user.id,
            file,
            FileKind.RESUME,
            RESUME_MIME_TYPES,
            settings.max_upload_bytes,
        )
        previous = await find_owned_file(db, user.id, application.resume_file_id)
        if previous:
            await file_service.remove(db, previous)
    except UploadValidationError as e:
        raise upload_http_error(e)
    except StorageError as e:
        raise storage_http_error(e)

    application.resume_file_id = user_file.id
    application.resume_url = user_file.url
    await db.flush()
    await db.refresh(application)

    return ApplicationResponse.model_validate(application)


@router.delete("/{application_id}/resume", response_model=ApplicationResponse)
async def delete_resume(
    application_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    file_service: FileService = Depends(get_file_service),
):
    application = await get_application_or_404(db, user.id, application_id)

    if not application.resume_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No resume to delete",
        )

    resume = await find_owned_file(db, user.id, application.resume_file_id)
    if resume:
        await file_service.remove(db, resume)

    application.resume_file_id = None
    application.resume_url = None
    await db.flush()
    await db.refresh(application)

    return ApplicationResponse.model_validate(application)
