"""
Database Models Package
"""

from trackmyjob.models.profile import Profile
from trackmyjob.models.job import ApplicationStatus, JobApplication
from trackmyjob.models.user_file import FileKind, UserFile

__all__ = ["Profile", "JobApplication", "ApplicationStatus", "UserFile", "FileKind"]
