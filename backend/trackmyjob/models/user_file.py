"""
UserFile Model - Uploaded attachments (resumes, avatars, other documents)
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from trackmyjob.database import Base
from trackmyjob.utils import generate_uuid, utcnow


class FileKind(str, Enum):
    RESUME = "resume"
    AVATAR = "avatar"
    OTHER = "other"


class UserFile(Base):
    """
    Metadata for a stored object. Created on upload and deleted on
    explicit removal; never updated in place.
    """

    __tablename__ = "user_files"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
    )

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    kind: Mapped[str] = mapped_column(String(20), default=FileKind.OTHER.value, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<UserFile {self.file_name} ({self.mime_type}, {self.size} bytes)>"
