"""
Review API Routes
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from flexispace.database import get_db
from flexispace.dependencies.auth import get_current_active_user
from flexispace.models.booking import Booking, BookingStatus
from flexispace.models.review import Review
from flexispace.models.user import User
from flexispace.schemas.review import ReviewCreate, ReviewResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("/", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Review the space of a completed booking"""
    booking = db.query(Booking).filter(Booking.id == review_data.booking_id).first()
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking with ID {review_data.booking_id} not found",
        )

    if booking.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only review your own bookings",
        )

    if booking.status != BookingStatus.COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only completed bookings can be reviewed",
        )

    if booking.review is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This booking has already been reviewed",
        )

    review = Review(**review_data.model_dump(), user_id=current_user.id, space_id=booking.space_id)

    db.add(review)
    db.commit()
    db.refresh(review)

    logger.info(f"Review {review.id} added to space {review.space_id}")
    return review
