"""
Notification Model
Tracks notifications sent to guests and providers about their bookings
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from flexispace.database import Base


class NotificationType(str, enum.Enum):
    """Type of notification"""

    BOOKING_REQUESTED = "BOOKING_REQUESTED"  # New request for a provider
    BOOKING_APPROVED = "BOOKING_APPROVED"
    BOOKING_REJECTED = "BOOKING_REJECTED"
    BOOKING_CANCELLED = "BOOKING_CANCELLED"
    INVOICE_PAID = "INVOICE_PAID"


class NotificationStatus(str, enum.Enum):
    """Status of notification"""

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class NotificationChannel(str, enum.Enum):
    """Channel used for notification"""

    SMS = "SMS"


class Notification(Base):
    """
    Notification Model
    Tracks all notifications sent by the system
    """

    __tablename__ = "notifications"

    # Primary Key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Associations
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(UUID(as_uuid=True), ForeignKey("bookings.id"), index=True)

    # Notification Details
    notification_type = Column(
        SQLEnum(NotificationType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    channel = Column(
        SQLEnum(NotificationChannel, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    status = Column(
        SQLEnum(NotificationStatus, values_callable=lambda x: [e.value for e in x]),
        default=NotificationStatus.PENDING,
        index=True,
    )

    # Recipient
    recipient_phone = Column(String(20))

    # Content
    message = Column(Text, nullable=False)

    # Provider Details (e.g., Twilio)
    provider = Column(String(50))
    provider_message_id = Column(String(255))

    # Delivery tracking
    sent_at = Column(DateTime)
    error_message = Column(Text)

    is_read = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="notifications")
    booking = relationship("Booking", back_populates="notifications")

    def __repr__(self):
        return f"<Notification(type='{self.notification_type}', channel='{self.channel}', status='{self.status}')>"
