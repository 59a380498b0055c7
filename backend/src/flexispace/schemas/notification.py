"""
Notification Pydantic Schemas
Response models for Notification endpoints
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from flexispace.models.notification import NotificationChannel, NotificationStatus, NotificationType


# Response Notification schema
class NotificationResponse(BaseModel):
    """Schema for Notification responses"""

    id: UUID
    user_id: UUID
    booking_id: Optional[UUID] = None

    notification_type: NotificationType
    channel: NotificationChannel
    status: NotificationStatus
    message: str

    recipient_phone: Optional[str] = None
    provider: Optional[str] = None
    provider_message_id: Optional[str] = None

    sent_at: Optional[datetime] = None
    error_message: Optional[str] = None
    is_read: bool

    created_at: datetime

    class Config:
        from_attributes = True


# List response
class NotificationList(BaseModel):
    """Schema for list of notifications"""

    notifications: List[NotificationResponse]
    total: int
    unread: int
