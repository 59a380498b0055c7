"""
Notification API Routes
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from flexispace.database import get_db
from flexispace.dependencies.auth import get_current_active_user
from flexispace.models.notification import Notification
from flexispace.models.user import User
from flexispace.schemas.notification import NotificationList, NotificationResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/", response_model=NotificationList)
def list_notifications(
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List the current user's notifications"""
    query = db.query(Notification).filter(Notification.user_id == current_user.id)

    unread = query.filter(Notification.is_read.is_(False)).count()

    if unread_only:
        query = query.filter(Notification.is_read.is_(False))

    total = query.count()
    notifications = query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()

    return {"notifications": notifications, "total": total, "unread": unread}


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Mark one of the current user's notifications as read"""
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == current_user.id)
        .first()
    )

    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    notification.is_read = True
    db.commit()
    db.refresh(notification)

    return notification
