"""
Space Model
Bookable workspaces and event venues, with their pricing tiers and business hours
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from flexispace.database import Base
from flexispace.utils.time import parse_hhmm


class SpaceType(str, enum.Enum):
    WORKSPACE = "WORKSPACE"
    EVENT_VENUE = "EVENT_VENUE"


class CancellationPolicy(str, enum.Enum):
    FLEXIBLE = "FLEXIBLE"
    MODERATE = "MODERATE"
    STRICT = "STRICT"
    SUPER_STRICT = "SUPER_STRICT"


class PricingType(str, enum.Enum):
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class DayOfWeek(str, enum.Enum):
    """Declared in ``date.weekday()`` order"""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, value) -> "DayOfWeek":
        return list(cls)[value.weekday()]


WORKSPACE_CATEGORIES = [
    "Private Office",
    "Meeting Room",
    "Conference Room",
    "Coworking Desk",
    "Open Workspace",
    "Workshop Room",
    "Seminar Room",
    "Executive Suite",
]

EVENT_VENUE_CATEGORIES = [
    "Wedding Venue",
    "Conference Hall",
    "Banquet Hall",
    "Party Space",
    "Exhibition Space",
]

CANCELLATION_POLICY_TEXT = {
    CancellationPolicy.FLEXIBLE: "Free cancellation up to 24 hours before the booking",
    CancellationPolicy.MODERATE: "Free cancellation up to 48 hours before the booking",
    CancellationPolicy.STRICT: "Free cancellation up to 7 days before the booking",
    CancellationPolicy.SUPER_STRICT: "Free cancellation up to 30 days before the booking",
}


def space_type_for_category(category: str) -> SpaceType:
    """Unknown categories default to a workspace"""
    if category in EVENT_VENUE_CATEGORIES:
        return SpaceType.EVENT_VENUE
    return SpaceType.WORKSPACE


class Space(Base):
    """
    Space Model
    A listing owned by a provider (``user_id``)
    """

    __tablename__ = "spaces"

    # Primary Key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Owner
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Listing
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image_src = Column(String(500), nullable=False)
    images = Column(JSON, default=list)
    space_type = Column(
        SQLEnum(SpaceType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        index=True,
    )
    category = Column(String(100), nullable=False, index=True)

    # Capacity
    capacity = Column(Integer, nullable=False)
    min_capacity = Column(Integer, default=1, nullable=False)

    # Location
    location_value = Column(String(20), index=True)  # Country code, e.g. "US"
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100))
    postal_code = Column(String(20))
    country = Column(String(100), nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)

    # Features
    square_footage = Column(Integer)
    ceiling_height = Column(Float)
    amenities = Column(JSON, default=list)
    equipment = Column(JSON, default=list)

    # Booking rules
    instant_booking = Column(Boolean, default=False, nullable=False)
    requires_approval = Column(Boolean, default=False, nullable=False)
    min_booking_hours = Column(Integer, default=1, nullable=False)
    max_booking_hours = Column(Integer)
    cancellation_policy = Column(
        SQLEnum(CancellationPolicy, values_callable=lambda x: [e.value for e in x]),
        default=CancellationPolicy.MODERATE,
        nullable=False,
    )
    rules = Column(JSON, default=list)

    # Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    verified = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="spaces")
    pricing = relationship("PricingTier", back_populates="space", cascade="all, delete-orphan")
    business_hours = relationship("BusinessHour", back_populates="space", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="space", cascade="all, delete-orphan")
    reviews = relationship(
        "Review",
        back_populates="space",
        cascade="all, delete-orphan",
        order_by="Review.created_at.desc()",
    )

    def __repr__(self):
        return f"<Space(title='{self.title}', city='{self.city}')>"

    def tier_for(self, pricing_type: PricingType):
        """Return the pricing tier of the given type, or None"""
        for tier in self.pricing:
            if tier.pricing_type == pricing_type:
                return tier
        return None

    def hours_for(self, day: DayOfWeek):
        for hours in self.business_hours:
            if hours.day_of_week == day:
                return hours
        return None

    @property
    def base_price(self) -> float:
        tier = self.tier_for(PricingType.HOURLY)
        return tier.price if tier else 0.0

    @property
    def average_rating(self):
        if not self.reviews:
            return None
        return round(sum(review.rating for review in self.reviews) / len(self.reviews), 2)

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    @property
    def booking_count(self) -> int:
        return len(self.bookings)

    @property
    def cancellation_policy_text(self) -> str:
        return CANCELLATION_POLICY_TEXT.get(self.cancellation_policy, "Contact host for cancellation policy")


class PricingTier(Base):
    """A rate for one pricing type of a space"""

    __tablename__ = "pricing_tiers"
    __table_args__ = (UniqueConstraint("space_id", "pricing_type", name="uq_pricing_tier_space_type"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    space_id = Column(UUID(as_uuid=True), ForeignKey("spaces.id"), nullable=False, index=True)

    pricing_type = Column(
        SQLEnum(PricingType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    price = Column(Float, nullable=False)
    currency = Column(String(10), default="USD", nullable=False)

    # Peak pricing (stored, not applied)
    is_peak_price = Column(Boolean, default=False, nullable=False)
    peak_days = Column(JSON, default=list)
    peak_hours = Column(String(50))

    # Fees
    cleaning_fee = Column(Float)
    service_fee = Column(Float)
    overtime_fee = Column(Float)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    space = relationship("Space", back_populates="pricing")

    def __repr__(self):
        return f"<PricingTier(type='{self.pricing_type}', price={self.price})>"


class BusinessHour(Base):
    """Opening hours of a space for one day of the week"""

    __tablename__ = "business_hours"
    __table_args__ = (UniqueConstraint("space_id", "day_of_week", name="uq_business_hour_space_day"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    space_id = Column(UUID(as_uuid=True), ForeignKey("spaces.id"), nullable=False, index=True)

    day_of_week = Column(
        SQLEnum(DayOfWeek, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    open_time = Column(String(5), nullable=False)  # "09:00"
    close_time = Column(String(5), nullable=False)  # "18:00"
    is_closed = Column(Boolean, default=False, nullable=False)

    space = relationship("Space", back_populates="business_hours")

    def __repr__(self):
        return f"<BusinessHour(day='{self.day_of_week}', {self.open_time}-{self.close_time})>"

    @property
    def open_hours(self) -> float:
        """Length of the opening window in hours"""
        if self.is_closed:
            return 0.0
        return max(0.0, (parse_hhmm(self.close_time) - parse_hhmm(self.open_time)) / 60)
