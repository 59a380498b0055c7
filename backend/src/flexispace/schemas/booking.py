"""
Booking Pydantic Schemas
Request and response models for Booking endpoints
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, validator

from flexispace.models.booking import BookingStatus, PaymentStatus
from flexispace.models.space import PricingType
from flexispace.schemas.invoice import InvoiceResponse
from flexispace.schemas.space import SpaceSummary
from flexispace.schemas.user import UserSummary
from flexispace.utils.time import to_naive_utc


# Base Booking schema
class BookingBase(BaseModel):
    """Base Booking schema with common fields"""

    start_date_time: datetime
    end_date_time: datetime
    attendee_count: int = Field(..., ge=1)

    event_type: Optional[str] = Field(None, max_length=255)
    company_name: Optional[str] = Field(None, max_length=255)
    special_requests: Optional[str] = None


class BookingCreate(BookingBase):
    """Schema for creating a new booking"""

    space_id: UUID
    pricing_type: PricingType = PricingType.HOURLY
    addons: List[str] = []

    @validator("start_date_time", "end_date_time")
    def normalize_datetimes(cls, v):
        return to_naive_utc(v)


# Update Booking schema
class BookingUpdate(BaseModel):
    """Schema for updating an existing booking"""

    status: Optional[BookingStatus] = None
    attendee_count: Optional[int] = Field(None, ge=1)
    event_type: Optional[str] = Field(None, max_length=255)
    company_name: Optional[str] = Field(None, max_length=255)
    special_requests: Optional[str] = None

    rejection_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None


class BookingDecision(BaseModel):
    """Optional body of reject and cancel"""

    reason: Optional[str] = Field(None, max_length=2000)


# Response Booking schema
class BookingResponse(BookingBase):
    """Schema for Booking responses"""

    id: UUID
    user_id: UUID
    space_id: UUID

    total_hours: float
    pricing_type: PricingType
    hourly_rate: float
    total_price: float
    addons: List[str] = []

    status: BookingStatus
    payment_status: PaymentStatus

    rejection_reason: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None

    space: Optional[SpaceSummary] = None
    user: Optional[UserSummary] = None
    invoice: Optional[InvoiceResponse] = None

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# List response
class BookingList(BaseModel):
    """Schema for list of bookings"""

    bookings: List[BookingResponse]
    total: int
    page: int = 1
    page_size: int = 50


class BookingActionResponse(BaseModel):
    """Result of approve, reject and cancel"""

    success: bool
    message: str
    booking: BookingResponse
