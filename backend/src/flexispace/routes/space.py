"""
Space API Routes
Endpoints for listing, browsing and managing spaces
"""

import datetime as dt
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_
from sqlalchemy.orm import Session

from flexispace.database import get_db
from flexispace.dependencies.auth import get_current_active_user, get_optional_user
from flexispace.models.booking import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus
from flexispace.models.review import Review
from flexispace.models.space import BusinessHour, PricingTier, PricingType, Space, SpaceType
from flexispace.models.user import User, UserType
from flexispace.schemas.review import ReviewResponse
from flexispace.schemas.space import (
    AvailabilityResponse,
    PriceQuote,
    SpaceCreate,
    SpaceDetailResponse,
    SpaceList,
    SpaceUpdate,
    check_capacity_and_hours,
)
from flexispace.services.availability import get_time_slots, validate_booking_request
from flexispace.services.pricing import calculate_price, split_tax
from flexispace.utils.time import to_naive_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spaces", tags=["Spaces"])


def get_space_or_404(db: Session, space_id: UUID) -> Space:
    space = db.query(Space).filter(Space.id == space_id).first()
    if not space:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Space with ID {space_id} not found",
        )
    return space


def get_active_space_or_404(db: Session, space_id: UUID) -> Space:
    space = get_space_or_404(db, space_id)
    if not space.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Space with ID {space_id} not found",
        )
    return space


def verify_space_owner(user: User, space: Space) -> None:
    if space.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: You can only manage your own spaces",
        )


def search_spaces(
    db: Session,
    user_id: Optional[UUID] = None,
    space_type: Optional[SpaceType] = None,
    category: Optional[str] = None,
    city: Optional[str] = None,
    location_value: Optional[str] = None,
    min_capacity: Optional[int] = None,
    max_capacity: Optional[int] = None,
    instant_booking: Optional[bool] = None,
    amenities: Optional[List[str]] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    start_date_time: Optional[datetime] = None,
    end_date_time: Optional[datetime] = None,
    skip: int = 0,
    limit: int = 20,
):
    """
    Active spaces matching the filters, newest first.

    Returns:
        (spaces on the requested page, total matches)
    """
    query = db.query(Space).filter(Space.is_active.is_(True))

    if user_id:
        query = query.filter(Space.user_id == user_id)

    if space_type:
        query = query.filter(Space.space_type == space_type)

    if category:
        query = query.filter(Space.category == category)

    if city:
        query = query.filter(Space.city.ilike(f"%{city}%"))

    if location_value:
        query = query.filter(Space.location_value == location_value)

    # Capacity range
    if min_capacity is not None:
        query = query.filter(Space.capacity >= min_capacity)

    if max_capacity is not None:
        query = query.filter(Space.capacity <= max_capacity)

    if instant_booking is not None:
        query = query.filter(Space.instant_booking.is_(instant_booking))

    # Price range on the hourly tier
    if min_price is not None or max_price is not None:
        query = query.join(
            PricingTier,
            and_(PricingTier.space_id == Space.id, PricingTier.pricing_type == PricingType.HOURLY),
        )
        if min_price is not None:
            query = query.filter(PricingTier.price >= min_price)
        if max_price is not None:
            query = query.filter(PricingTier.price <= max_price)

    # Free for the requested time range
    if start_date_time and end_date_time:
        conflict = (
            db.query(Booking.id)
            .filter(
                Booking.space_id == Space.id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
                Booking.start_date_time < end_date_time,
                Booking.end_date_time > start_date_time,
            )
            .exists()
        )
        query = query.filter(~conflict)

    query = query.order_by(Space.created_at.desc())

    if amenities:
        # JSON list columns; the containment check runs in Python
        wanted = set(amenities)
        matches = [space for space in query.all() if wanted.issubset(space.amenities or [])]
        return matches[skip : skip + limit], len(matches)

    total = query.count()
    return query.offset(skip).limit(limit).all(), total


@router.post("/", response_model=SpaceDetailResponse, status_code=status.HTTP_201_CREATED)
def create_space(
    space_data: SpaceCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Create a new space with its pricing tiers and business hours"""
    data = space_data.model_dump(exclude={"pricing", "business_hours"})

    space = Space(**data, user_id=current_user.id)
    space.pricing = [PricingTier(**tier.model_dump()) for tier in space_data.pricing]
    space.business_hours = [BusinessHour(**hours.model_dump()) for hours in space_data.business_hours]

    # Listing a space makes a guest a provider
    if current_user.user_type == UserType.GUEST:
        current_user.user_type = UserType.PROVIDER

    db.add(space)
    db.commit()
    db.refresh(space)

    logger.info(f"Space {space.id} created by user {current_user.id}")
    return space


@router.get("/", response_model=SpaceList)
def list_spaces(
    user_id: Optional[UUID] = None,
    space_type: Optional[SpaceType] = None,
    category: Optional[str] = None,
    city: Optional[str] = None,
    location_value: Optional[str] = None,
    min_capacity: Optional[int] = Query(None, ge=0),
    max_capacity: Optional[int] = Query(None, ge=0),
    instant_booking: Optional[bool] = None,
    amenities: Optional[str] = Query(None, description="Comma-separated, all must be present"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    start_date_time: Optional[datetime] = None,
    end_date_time: Optional[datetime] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """List active spaces with filters"""
    if (start_date_time is None) != (end_date_time is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both start_date_time and end_date_time are required to filter by availability",
        )

    amenity_list = [a.strip() for a in amenities.split(",") if a.strip()] if amenities else None

    spaces, total = search_spaces(
        db,
        user_id=user_id,
        space_type=space_type,
        category=category,
        city=city,
        location_value=location_value,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        instant_booking=instant_booking,
        amenities=amenity_list,
        min_price=min_price,
        max_price=max_price,
        start_date_time=to_naive_utc(start_date_time),
        end_date_time=to_naive_utc(end_date_time),
        skip=skip,
        limit=limit,
    )

    return {
        "spaces": spaces,
        "total": total,
        "page": (skip // limit) + 1,
        "page_size": limit,
    }


@router.get("/{space_id}", response_model=SpaceDetailResponse)
def get_space(
    space_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Get a specific space; deactivated spaces are only visible to their owner"""
    space = get_space_or_404(db, space_id)

    if not space.is_active and (current_user is None or current_user.id != space.user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Space with ID {space_id} not found",
        )

    return space


@router.patch("/{space_id}", response_model=SpaceDetailResponse)
def update_space(
    space_id: UUID,
    space_data: SpaceUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Update space information"""
    space = get_space_or_404(db, space_id)
    verify_space_owner(current_user, space)

    update_data = space_data.model_dump(exclude_unset=True, exclude={"pricing", "business_hours"})

    # Cross-field rules against the merged values
    error = check_capacity_and_hours(
        update_data.get("capacity", space.capacity),
        update_data.get("min_capacity", space.min_capacity),
        update_data.get("min_booking_hours", space.min_booking_hours),
        update_data.get("max_booking_hours", space.max_booking_hours),
    )
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    for field, value in update_data.items():
        setattr(space, field, value)

    # Replacement of related rows: remove the old ones first (unique per type/day)
    if space_data.pricing is not None:
        space.pricing.clear()
        db.flush()
        space.pricing.extend(PricingTier(**tier.model_dump()) for tier in space_data.pricing)

    if space_data.business_hours is not None:
        space.business_hours.clear()
        db.flush()
        space.business_hours.extend(BusinessHour(**hours.model_dump()) for hours in space_data.business_hours)

    db.commit()
    db.refresh(space)

    return space


@router.delete("/{space_id}")
def delete_space(
    space_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Deactivate a space (soft delete)"""
    space = get_space_or_404(db, space_id)
    verify_space_owner(current_user, space)

    active_bookings = (
        db.query(Booking)
        .filter(
            Booking.space_id == space.id,
            Booking.status.in_([BookingStatus.PENDING, BookingStatus.APPROVED]),
            Booking.end_date_time > datetime.utcnow(),
        )
        .count()
    )
    if active_bookings:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete space with active bookings",
        )

    space.is_active = False
    db.commit()

    logger.info(f"Space {space.id} deactivated by user {current_user.id}")
    return {"message": "Space deleted", "space_id": space.id}


@router.get("/{space_id}/availability", response_model=AvailabilityResponse)
def get_space_availability(
    space_id: UUID,
    date: dt.date = Query(..., description="Day to list slots for (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
):
    """Hourly time slots of a day, from the space's business hours"""
    space = get_active_space_or_404(db, space_id)
    day_of_week, is_closed, slots = get_time_slots(db, space, date)

    return {
        "space_id": space.id,
        "date": date,
        "day_of_week": day_of_week,
        "is_closed": is_closed,
        "slots": slots,
    }


@router.get("/{space_id}/quote", response_model=PriceQuote)
def get_price_quote(
    space_id: UUID,
    start_date_time: datetime = Query(...),
    end_date_time: datetime = Query(...),
    pricing_type: PricingType = PricingType.HOURLY,
    attendee_count: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """Price a booking would get, without checking for conflicts"""
    space, total_hours, tier = validate_booking_request(
        db,
        space_id=space_id,
        start_time=to_naive_utc(start_date_time),
        end_time=to_naive_utc(end_date_time),
        pricing_type=pricing_type,
        attendee_count=attendee_count,
        check_conflicts=False,
    )
    price = calculate_price(tier, total_hours)
    subtotal, taxes = split_tax(price.total_price)

    return {
        "space_id": space.id,
        "pricing_type": price.pricing_type,
        "total_hours": price.total_hours,
        "rate": price.rate,
        "units": price.units,
        "base_amount": price.base_amount,
        "cleaning_fee": price.cleaning_fee,
        "service_fee": price.service_fee,
        "total_price": price.total_price,
        "subtotal": subtotal,
        "taxes": taxes,
        "currency": price.currency,
    }


@router.get("/{space_id}/reviews", response_model=List[ReviewResponse])
def list_space_reviews(
    space_id: UUID,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Reviews of a space, newest first"""
    space = get_space_or_404(db, space_id)

    return (
        db.query(Review)
        .filter(Review.space_id == space.id)
        .order_by(Review.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
