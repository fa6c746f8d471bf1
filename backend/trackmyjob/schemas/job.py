"""
Job Application Schemas for API Validation
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from trackmyjob.models.job import ApplicationStatus


def _clean_url(v: Optional[str]) -> Optional[str]:
    """Basic URL validation."""
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not v.startswith(("http://", "https://")):
        raise ValueError("URL must start with http:// or https://")
    return v


class ApplicationBase(BaseModel):
    """Base schema with the user-editable fields."""

    company_name: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)
    job_url: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    salary_range: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @field_validator("company_name", "position")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("job_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _clean_url(v)


class ApplicationCreate(ApplicationBase):
    """Schema for creating a job application."""

    status: ApplicationStatus = ApplicationStatus.APPLIED
    applied_date: Optional[date] = None


class ApplicationUpdate(BaseModel):
    """Schema for updating a job application. All fields optional."""

    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    job_url: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=255)
    salary_range: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    applied_date: Optional[date] = None

    @field_validator("company_name", "position")
    @classmethod
    def strip_required(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("job_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _clean_url(v)


class ApplicationStatusUpdate(BaseModel):
    """Body of the status-change endpoint."""

    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    """Schema for job application response."""

    id: str
    user_id: str
    company_name: str
    position: str
    status: ApplicationStatus
    applied_date: date
    job_url: Optional[str] = None
    location: Optional[str] = None
    salary_range: Optional[str] = None
    resume_url: Optional[str] = None
    resume_file_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ApplicationListResponse(BaseModel):
    """Response for listing job applications."""

    applications: list[ApplicationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
