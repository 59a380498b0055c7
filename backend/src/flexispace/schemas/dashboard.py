"""
Dashboard Pydantic Schemas
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from flexispace.schemas.booking import BookingResponse


class SpaceStats(BaseModel):
    pending_bookings: int
    total_bookings: int
    monthly_revenue: float
    average_rating: float


class PopularSpace(BaseModel):
    id: UUID
    title: str
    image_src: str
    bookings: int
    revenue: float


class DashboardOverview(BaseModel):
    """Headline figures of a provider's dashboard"""

    total_spaces: int
    active_spaces: int
    total_bookings: int
    pending_bookings: int
    upcoming_bookings: int
    completed_bookings: int

    monthly_revenue: float
    weekly_revenue: float

    average_rating: float
    total_reviews: int

    occupancy_rate: float  # Percentage

    popular_spaces: List[PopularSpace]
    recent_bookings: List[BookingResponse]


class DailyFigures(BaseModel):
    date: str  # YYYY-MM-DD
    bookings: int
    revenue: float


class SpaceFigures(BaseModel):
    space_id: UUID
    title: str
    bookings: int
    revenue: float
    hours: float


class AnalyticsResponse(BaseModel):
    timeframe: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    total_bookings: int
    total_revenue: float
    total_hours: float
    average_booking_value: float
    conversion_rate: float  # Percentage
    cancellation_rate: float  # Percentage

    status_breakdown: Dict[str, int]
    daily: List[DailyFigures]
    by_space: List[SpaceFigures]


class PlatformStats(BaseModel):
    total_users: int
    total_providers: int
    total_spaces: int
    active_spaces: int
    total_bookings: int
    pending_bookings: int
    total_invoices: int
    total_bookings_this_month: int
    total_revenue_this_month: float
