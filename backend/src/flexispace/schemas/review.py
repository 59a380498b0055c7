"""
Review Pydantic Schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from flexispace.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    """A guest reviewing a completed booking"""

    booking_id: UUID
    rating: int = Field(..., ge=1, le=5)
    cleanliness_rating: Optional[int] = Field(None, ge=1, le=5)
    amenities_rating: Optional[int] = Field(None, ge=1, le=5)
    location_rating: Optional[int] = Field(None, ge=1, le=5)
    value_rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=5000)


class ReviewResponse(BaseModel):
    id: UUID
    user_id: UUID
    space_id: UUID
    booking_id: UUID

    rating: int
    cleanliness_rating: Optional[int] = None
    amenities_rating: Optional[int] = None
    location_rating: Optional[int] = None
    value_rating: Optional[int] = None
    comment: Optional[str] = None

    user: Optional[UserSummary] = None

    created_at: datetime

    class Config:
        from_attributes = True
