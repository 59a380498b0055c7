"""
Availability Service
Booking conflict detection, booking request validation and hourly time slots
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from flexispace.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from flexispace.models.space import DayOfWeek, PricingTier, PricingType, Space
from flexispace.services.pricing import booking_hours
from flexispace.utils.time import parse_hhmm

logger = logging.getLogger(__name__)


def find_conflicting_booking(
    db: Session,
    space_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_booking_id: Optional[UUID] = None,
) -> Optional[Booking]:
    """
    Return an active booking of the space overlapping ``[start_time, end_time)``, or None.
    Back-to-back bookings do not overlap.
    """
    query = db.query(Booking).filter(
        Booking.space_id == space_id,
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        # Check for time overlap
        Booking.start_date_time < end_time,
        Booking.end_date_time > start_time,
    )

    if exclude_booking_id:
        query = query.filter(Booking.id != exclude_booking_id)

    return query.first()


def check_double_booking(
    db: Session,
    space_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_booking_id: Optional[UUID] = None,
) -> bool:
    """Returns True if there's a conflict (double booking), False if available."""
    return find_conflicting_booking(db, space_id, start_time, end_time, exclude_booking_id) is not None


def check_capacity(space: Space, attendee_count: int) -> None:
    if attendee_count < space.min_capacity or attendee_count > space.capacity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Attendee count must be between {space.min_capacity} and {space.capacity}",
        )


def validate_booking_request(
    db: Session,
    space_id: UUID,
    start_time: datetime,
    end_time: datetime,
    pricing_type: PricingType,
    attendee_count: Optional[int] = None,
    check_conflicts: bool = True,
) -> Tuple[Space, float, PricingTier]:
    """
    Run the booking checks in order and return (space, total_hours, tier).

    Raises:
        HTTPException: 400 for invalid duration, capacity, length or tier,
            404 for a missing or inactive space, 409 for an overlapping booking
    """
    total_hours = booking_hours(start_time, end_time)
    if total_hours <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid booking duration")

    space = db.query(Space).filter(Space.id == space_id, Space.is_active.is_(True)).first()
    if not space:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Space with ID {space_id} not found",
        )

    if attendee_count is not None:
        check_capacity(space, attendee_count)

    if total_hours < space.min_booking_hours:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Minimum booking duration is {space.min_booking_hours} hours",
        )
    if space.max_booking_hours is not None and total_hours > space.max_booking_hours:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum booking duration is {space.max_booking_hours} hours",
        )

    if check_conflicts and check_double_booking(db, space.id, start_time, end_time):
        logger.info(f"Booking conflict on space {space.id} for {start_time} - {end_time}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"'{space.title}' is already booked for the requested time slot",
        )

    tier = space.tier_for(pricing_type)
    if tier is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Space has no {pricing_type.value} pricing",
        )

    return space, total_hours, tier


def get_time_slots(
    db: Session, space: Space, day: date, now: Optional[datetime] = None
) -> Tuple[DayOfWeek, bool, List[Dict]]:
    """
    Hourly slots of one day, from that weekday's business hours.

    Returns:
        (day_of_week, is_closed, slots); a day without hours is closed
    """
    now = now or datetime.utcnow()
    day_of_week = DayOfWeek.from_date(day)
    hours = space.hours_for(day_of_week)
    if hours is None or hours.is_closed:
        return day_of_week, True, []

    midnight = datetime(day.year, day.month, day.day)
    opening = midnight + timedelta(minutes=parse_hhmm(hours.open_time))
    closing = midnight + timedelta(minutes=parse_hhmm(hours.close_time))

    bookings = (
        db.query(Booking)
        .filter(
            Booking.space_id == space.id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.start_date_time < closing,
            Booking.end_date_time > opening,
        )
        .all()
    )

    slots = []
    current = opening
    while current < closing:
        slot_end = min(current + timedelta(hours=1), closing)
        booked = any(b.start_date_time < slot_end and b.end_date_time > current for b in bookings)
        slots.append(
            {
                "start": current,
                "end": slot_end,
                "display": f"{current:%H:%M} - {slot_end:%H:%M}",
                "available": current >= now and not booked,
            }
        )
        current = slot_end

    return day_of_week, False, slots
