"""
Profile Model - One row per registered user
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from trackmyjob.database import Base
from trackmyjob.utils import utcnow


class Profile(Base):
    """
    Public profile of an authenticated user.
    The primary key is the user id issued by the auth service.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Avatar
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    avatar_file_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<Profile {self.display_name or self.id}>"
