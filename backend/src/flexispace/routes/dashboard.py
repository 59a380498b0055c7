"""
Dashboard endpoints with real database statistics
"""

from typing import Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from flexispace.database import get_db
from flexispace.dependencies.auth import get_admin, get_current_active_user
from flexispace.models.space import Space
from flexispace.models.user import User
from flexispace.schemas.dashboard import AnalyticsResponse, DashboardOverview, PlatformStats, SpaceStats
from flexispace.services.analytics import platform_stats, provider_analytics, provider_overview, space_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=Dict[str, SpaceStats])
def get_space_stats(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Per-space statistics for the current user's spaces
    """
    return space_stats(db, current_user)


@router.get("/overview", response_model=DashboardOverview)
def get_overview(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Dashboard overview for the current user's spaces
    """
    return provider_overview(db, current_user)


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    timeframe: str = Query("month", pattern="^(week|month|year|all)$"),
    space_id: Optional[UUID] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Booking and revenue analytics over a timeframe, optionally for one space
    """
    if space_id:
        space = db.query(Space).filter(Space.id == space_id).first()
        if not space:
            raise HTTPException(status_code=404, detail=f"Space with ID {space_id} not found")
        if space.user_id != current_user.id:
            raise HTTPException(status_code=403, detail="Access denied: You can only view your own spaces")

    return provider_analytics(db, current_user, timeframe=timeframe, space_id=space_id)


@router.get("/admin/stats", response_model=PlatformStats)
def get_admin_stats(
    current_user: User = Depends(get_admin),
    db: Session = Depends(get_db),
):
    """
    Get system-wide statistics (admin only)
    """
    return platform_stats(db)
