"""
JobApplication Model - A job the user has applied to
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from trackmyjob.database import Base
from trackmyjob.utils import generate_uuid, utcnow


class ApplicationStatus(str, Enum):
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFERED = "offered"
    REJECTED = "rejected"
    ACCEPTED = "accepted"
    WITHDRAWN = "withdrawn"

    @classmethod
    def active_statuses(cls) -> List[str]:
        return [
            cls.APPLIED.value,
            cls.INTERVIEWING.value,
            cls.OFFERED.value,
        ]


class JobApplication(Base):
    """
    Represents a single tracked job application.
    Owned by exactly one user; every query filters on user_id.
    """

    __tablename__ = "job_applications"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    # Owner (auth service user id)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Job details
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[str] = mapped_column(String(255), nullable=False)
    job_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    salary_range: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    status: Mapped[str] = mapped_column(
        String(50),
        default=ApplicationStatus.APPLIED.value,
        nullable=False,
    )
    applied_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)

    # Attached resume
    resume_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    resume_file_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<JobApplication {self.position} at {self.company_name} ({self.status})>"
