"""
Space Pydantic Schemas
Request and response models for Space endpoints
"""

import datetime as dt
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from flexispace.models.space import (
    EVENT_VENUE_CATEGORIES,
    WORKSPACE_CATEGORIES,
    CancellationPolicy,
    DayOfWeek,
    PricingType,
    SpaceType,
    space_type_for_category,
)
from flexispace.schemas.review import ReviewResponse
from flexispace.schemas.user import UserSummary
from flexispace.utils.time import parse_hhmm

HHMM_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


# Nested schemas for Space relations
class PricingTierCreate(BaseModel):
    """A rate for one pricing type"""

    pricing_type: PricingType
    price: float = Field(..., ge=0)
    currency: str = "USD"
    is_peak_price: bool = False
    peak_days: List[str] = []
    peak_hours: Optional[str] = None  # e.g. "17:00-21:00"
    cleaning_fee: Optional[float] = Field(None, ge=0)
    service_fee: Optional[float] = Field(None, ge=0)
    overtime_fee: Optional[float] = Field(None, ge=0)


class PricingTierResponse(PricingTierCreate):
    id: UUID
    space_id: UUID

    class Config:
        from_attributes = True


class BusinessHourCreate(BaseModel):
    """Opening hours for a day"""

    day_of_week: DayOfWeek
    open_time: str = Field(..., pattern=HHMM_PATTERN)  # e.g., "09:00"
    close_time: str = Field(..., pattern=HHMM_PATTERN)  # e.g., "18:00"
    is_closed: bool = False

    @model_validator(mode="after")
    def check_open_before_close(self):
        if not self.is_closed and parse_hhmm(self.open_time) >= parse_hhmm(self.close_time):
            raise ValueError("open_time must be before close_time")
        return self


class BusinessHourResponse(BaseModel):
    id: UUID
    day_of_week: DayOfWeek
    open_time: str
    close_time: str
    is_closed: bool

    class Config:
        from_attributes = True


def _check_unique_relations(pricing, business_hours):
    if pricing is not None:
        types = [tier.pricing_type for tier in pricing]
        if len(types) != len(set(types)):
            raise ValueError("Each pricing type may only appear once")
    if business_hours is not None:
        days = [hours.day_of_week for hours in business_hours]
        if len(days) != len(set(days)):
            raise ValueError("Each day of the week may only appear once")


def check_capacity_and_hours(capacity, min_capacity, min_booking_hours, max_booking_hours) -> Optional[str]:
    """Return an error message when the cross-field rules are broken, else None"""
    if min_capacity is not None and capacity is not None and min_capacity > capacity:
        return "min_capacity cannot exceed capacity"
    if max_booking_hours is not None and min_booking_hours is not None and min_booking_hours > max_booking_hours:
        return "min_booking_hours cannot exceed max_booking_hours"
    return None


# Base Space schema (shared fields)
class SpaceBase(BaseModel):
    """Base Space schema with common fields"""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    image_src: str = Field(..., min_length=1, max_length=500)
    images: List[str] = []
    space_type: SpaceType
    category: str = Field(..., min_length=1, max_length=100)

    capacity: int = Field(..., ge=1)
    min_capacity: int = Field(1, ge=1)

    location_value: Optional[str] = None
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    square_footage: Optional[int] = Field(None, ge=0)
    ceiling_height: Optional[float] = Field(None, ge=0)
    amenities: List[str] = []
    equipment: List[str] = []

    instant_booking: bool = False
    requires_approval: bool = False
    min_booking_hours: int = Field(1, ge=1)
    max_booking_hours: Optional[int] = Field(None, ge=1)
    cancellation_policy: CancellationPolicy = CancellationPolicy.MODERATE
    rules: List[str] = []


# Create Space schema
class SpaceCreate(SpaceBase):
    """Schema for creating a new space together with its pricing and hours"""

    pricing: List[PricingTierCreate] = Field(..., min_length=1)
    business_hours: List[BusinessHourCreate] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_consistency(self):
        error = check_capacity_and_hours(
            self.capacity, self.min_capacity, self.min_booking_hours, self.max_booking_hours
        )
        if error:
            raise ValueError(error)
        _check_unique_relations(self.pricing, self.business_hours)

        if self.category in WORKSPACE_CATEGORIES + EVENT_VENUE_CATEGORIES:
            if space_type_for_category(self.category) != self.space_type:
                raise ValueError(f"Category {self.category} does not match space type {self.space_type.value}")
        return self


NULLABLE_SPACE_FIELDS = {
    "location_value",
    "state",
    "postal_code",
    "latitude",
    "longitude",
    "square_footage",
    "ceiling_height",
    "max_booking_hours",
}


# Update Space schema
class SpaceUpdate(BaseModel):
    """
    Partial update. ``pricing`` and ``business_hours``, when given, replace
    the existing rows.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    image_src: Optional[str] = Field(None, min_length=1, max_length=500)
    images: Optional[List[str]] = None
    space_type: Optional[SpaceType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)

    capacity: Optional[int] = Field(None, ge=1)
    min_capacity: Optional[int] = Field(None, ge=1)

    location_value: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = Field(None, min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    square_footage: Optional[int] = Field(None, ge=0)
    ceiling_height: Optional[float] = Field(None, ge=0)
    amenities: Optional[List[str]] = None
    equipment: Optional[List[str]] = None

    instant_booking: Optional[bool] = None
    requires_approval: Optional[bool] = None
    min_booking_hours: Optional[int] = Field(None, ge=1)
    max_booking_hours: Optional[int] = Field(None, ge=1)
    cancellation_policy: Optional[CancellationPolicy] = None
    rules: Optional[List[str]] = None
    is_active: Optional[bool] = None

    pricing: Optional[List[PricingTierCreate]] = Field(None, min_length=1)
    business_hours: Optional[List[BusinessHourCreate]] = Field(None, min_length=1)

    @model_validator(mode="after")
    def check_nulls_and_relations(self):
        # Explicit nulls are only allowed where the column is nullable
        nulled = [field for field in self.model_fields_set if getattr(self, field) is None]
        required = sorted(set(nulled) - NULLABLE_SPACE_FIELDS)
        if required:
            raise ValueError(f"Fields cannot be null: {', '.join(required)}")

        _check_unique_relations(self.pricing, self.business_hours)
        return self


# Response Space schema
class SpaceResponse(SpaceBase):
    """Schema for Space responses"""

    id: UUID
    user_id: UUID
    is_active: bool
    verified: bool

    pricing: List[PricingTierResponse] = []
    business_hours: List[BusinessHourResponse] = []

    base_price: float
    average_rating: Optional[float] = None
    review_count: int = 0
    booking_count: int = 0

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SpaceDetailResponse(SpaceResponse):
    """Space with its owner, reviews and policy text"""

    user: UserSummary
    reviews: List[ReviewResponse] = []
    cancellation_policy_text: str

    class Config:
        from_attributes = True


class SpaceSummary(BaseModel):
    """Space as embedded in bookings and favorites"""

    id: UUID
    user_id: UUID
    title: str
    image_src: str
    category: str
    city: str
    country: str

    class Config:
        from_attributes = True


# List response
class SpaceList(BaseModel):
    """Schema for list of spaces"""

    spaces: List[SpaceResponse]
    total: int
    page: int = 1
    page_size: int = 20


# Availability
class TimeSlot(BaseModel):
    start: datetime
    end: datetime
    display: str  # "09:00 - 10:00"
    available: bool


class AvailabilityResponse(BaseModel):
    space_id: UUID
    date: dt.date
    day_of_week: DayOfWeek
    is_closed: bool
    slots: List[TimeSlot]


class PriceQuote(BaseModel):
    """Price the booking would get, with the tax split of its invoice"""

    space_id: UUID
    pricing_type: PricingType
    total_hours: float
    rate: float
    units: float
    base_amount: float
    cleaning_fee: float
    service_fee: float
    total_price: float
    subtotal: float
    taxes: float
    currency: str
