"""
Dashboard API Routes - Statistics for the caller's applications
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from trackmyjob.database import get_db
from trackmyjob.models.job import ApplicationStatus, JobApplication
from trackmyjob.services.auth import AuthenticatedUser
from trackmyjob.api.dependencies import get_current_user
from trackmyjob.utils import utcnow

router = APIRouter()


@router.get("/stats")
async def get_dashboard_stats(
    days: int = Query(30, ge=1, le=365),
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get application statistics for the current user."""
    since = utcnow() - timedelta(days=days)

    # Count by status
    status_query = (
        select(JobApplication.status, func.count(JobApplication.id))
        .where(JobApplication.user_id == user.id)
        .group_by(JobApplication.status)
    )
    result = await db.execute(status_query)
    status_counts = {row[0]: row[1] for row in result.all()}

    total = sum(status_counts.values())

    recent_query = select(func.count(JobApplication.id)).where(
        JobApplication.user_id == user.id,
        JobApplication.created_at >= since,
    )
    recent = await db.scalar(recent_query) or 0

    by_status = {s.value: status_counts.get(s.value, 0) for s in ApplicationStatus}
    active = sum(by_status[s] for s in ApplicationStatus.active_statuses())

    # Share of applications that moved past "applied"
    responded = total - by_status[ApplicationStatus.APPLIED.value]
    response_rate = (responded / total * 100) if total > 0 else 0

    return {
        "total_applications": total,
        "recent_applications": recent,
        "by_status": by_status,
        "active": active,
        "response_rate": round(response_rate, 1),
        "period_days": days,
    }
