"""
Booking Model
A guest's reservation of a space for a time range
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from flexispace.database import Base
from flexispace.models.space import PricingType


class BookingStatus(str, enum.Enum):
    """Status of booking"""

    PENDING = "PENDING"  # Waiting for the provider
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"  # Booking took place


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"


# Statuses a space provider may move a booking to
BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: [BookingStatus.APPROVED, BookingStatus.REJECTED],
    BookingStatus.APPROVED: [BookingStatus.CANCELLED, BookingStatus.COMPLETED],
    BookingStatus.REJECTED: [],
    BookingStatus.CANCELLED: [],
    BookingStatus.COMPLETED: [],
}

# Statuses that hold the space
ACTIVE_BOOKING_STATUSES = [BookingStatus.PENDING, BookingStatus.APPROVED, BookingStatus.COMPLETED]

# Statuses that count towards revenue
REVENUE_BOOKING_STATUSES = [BookingStatus.APPROVED, BookingStatus.COMPLETED]


def can_transition(current: BookingStatus, new: BookingStatus) -> bool:
    return new in BOOKING_TRANSITIONS.get(current, [])


class Booking(Base):
    """
    Booking Model
    ``user_id`` is the guest; the provider is reached through ``space.user_id``
    """

    __tablename__ = "bookings"

    # Primary Key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Associations
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    space_id = Column(UUID(as_uuid=True), ForeignKey("spaces.id"), nullable=False, index=True)

    # When
    start_date_time = Column(DateTime, nullable=False, index=True)
    end_date_time = Column(DateTime, nullable=False, index=True)
    total_hours = Column(Float, nullable=False)

    # Event details
    attendee_count = Column(Integer, nullable=False)
    event_type = Column(String(255))
    company_name = Column(String(255))
    special_requests = Column(Text)
    addons = Column(JSON, default=list)

    # Pricing
    pricing_type = Column(
        SQLEnum(PricingType, values_callable=lambda x: [e.value for e in x]),
        default=PricingType.HOURLY,
        nullable=False,
    )
    hourly_rate = Column(Float, nullable=False)  # Rate of the chosen tier
    total_price = Column(Float, nullable=False)

    status = Column(
        SQLEnum(BookingStatus, values_callable=lambda x: [e.value for e in x]),
        default=BookingStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_status = Column(
        SQLEnum(PaymentStatus, values_callable=lambda x: [e.value for e in x]),
        default=PaymentStatus.PENDING,
        nullable=False,
    )

    # Rejection / cancellation
    rejection_reason = Column(Text)
    cancellation_reason = Column(Text)
    cancelled_at = Column(DateTime)
    cancelled_by = Column(String(20))  # guest, provider

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="bookings")
    space = relationship("Space", back_populates="bookings")
    invoice = relationship("Invoice", back_populates="booking", uselist=False, cascade="all, delete-orphan")
    review = relationship("Review", back_populates="booking", uselist=False, cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="booking", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Booking(id='{self.id}', status='{self.status}', start='{self.start_date_time}')>"

    @property
    def has_started(self) -> bool:
        return self.start_date_time <= datetime.utcnow()
