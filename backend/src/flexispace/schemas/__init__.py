"""
Pydantic Schemas Package
Exports all request/response schemas
"""

from flexispace.schemas.booking import (
    BookingActionResponse,
    BookingCreate,
    BookingDecision,
    BookingList,
    BookingResponse,
    BookingUpdate,
)
from flexispace.schemas.invoice import InvoiceList, InvoiceListItem, InvoiceResponse, InvoiceUpdate
from flexispace.schemas.notification import NotificationList, NotificationResponse
from flexispace.schemas.review import ReviewCreate, ReviewResponse
from flexispace.schemas.space import (
    AvailabilityResponse,
    BusinessHourCreate,
    PriceQuote,
    PricingTierCreate,
    SpaceCreate,
    SpaceDetailResponse,
    SpaceList,
    SpaceResponse,
    SpaceSummary,
    SpaceUpdate,
    TimeSlot,
)
from flexispace.schemas.user import (
    LoginRequest,
    PasswordChange,
    Token,
    TokenRefresh,
    UserCreate,
    UserResponse,
    UserSummary,
    UserUpdate,
)

__all__ = [
    # Space schemas
    "SpaceCreate",
    "SpaceUpdate",
    "SpaceResponse",
    "SpaceDetailResponse",
    "SpaceSummary",
    "SpaceList",
    "PricingTierCreate",
    "BusinessHourCreate",
    "TimeSlot",
    "AvailabilityResponse",
    "PriceQuote",
    # Booking schemas
    "BookingCreate",
    "BookingUpdate",
    "BookingDecision",
    "BookingResponse",
    "BookingList",
    "BookingActionResponse",
    # Invoice schemas
    "InvoiceUpdate",
    "InvoiceResponse",
    "InvoiceListItem",
    "InvoiceList",
    # Review schemas
    "ReviewCreate",
    "ReviewResponse",
    # Notification schemas
    "NotificationResponse",
    "NotificationList",
    # User schemas
    "LoginRequest",
    "PasswordChange",
    "Token",
    "TokenRefresh",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",
]
