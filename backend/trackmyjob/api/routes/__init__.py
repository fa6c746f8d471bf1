"""
API Routes Package
"""

from trackmyjob.api.routes import profiles, applications, files, dashboard

__all__ = ["profiles", "applications", "files", "dashboard"]
