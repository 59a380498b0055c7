"""
Booking API Routes
Endpoints for requesting, reviewing and managing bookings
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from flexispace.database import get_db
from flexispace.dependencies.auth import get_current_active_user, get_optional_user
from flexispace.models.booking import Booking, BookingStatus, can_transition
from flexispace.models.notification import NotificationType
from flexispace.models.space import Space
from flexispace.models.user import User
from flexispace.schemas.booking import (
    BookingActionResponse,
    BookingCreate,
    BookingDecision,
    BookingList,
    BookingResponse,
    BookingUpdate,
)
from flexispace.services.availability import (
    check_capacity,
    check_double_booking,
    validate_booking_request,
)
from flexispace.services.invoice_service import issue_invoice
from flexispace.services.notification_service import NotificationService
from flexispace.services.pricing import booking_hours, calculate_price
from flexispace.utils.time import to_naive_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])

# Fields the guest may edit until the booking starts
GUEST_EDITABLE_FIELDS = ["attendee_count", "event_type", "company_name", "special_requests"]

STATUS_EVENTS = {
    BookingStatus.APPROVED: NotificationType.BOOKING_APPROVED,
    BookingStatus.REJECTED: NotificationType.BOOKING_REJECTED,
    BookingStatus.CANCELLED: NotificationType.BOOKING_CANCELLED,
}


def get_booking_or_404(db: Session, booking_id: UUID) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking with ID {booking_id} not found",
        )

    return booking


def is_guest(user: User, booking: Booking) -> bool:
    return booking.user_id == user.id


def is_provider(user: User, booking: Booking) -> bool:
    return booking.space.user_id == user.id


def verify_booking_party(user: User, booking: Booking) -> None:
    """Only the guest and the space provider may access a booking"""
    if not is_guest(user, booking) and not is_provider(user, booking):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: This booking belongs to another user",
        )


def verify_provider(user: User, booking: Booking) -> None:
    if not is_provider(user, booking):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the space provider can perform this action",
        )


def change_booking_status(
    db: Session,
    booking: Booking,
    user: User,
    new_status: BookingStatus,
    reason: Optional[str] = None,
) -> Booking:
    """
    Move a booking to a new status on behalf of a user.

    Providers follow the transition table; guests may only cancel a pending
    or approved booking before it starts. Approval issues the invoice, and
    the guest is notified of every change except completion.

    Raises:
        HTTPException: 400 for an invalid transition, 403 for a guest changing
            anything but cancellation
    """
    guest_cancelling = (
        is_guest(user, booking)
        and new_status == BookingStatus.CANCELLED
        and booking.status in [BookingStatus.PENDING, BookingStatus.APPROVED]
    )

    if guest_cancelling:
        if booking.has_started:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot cancel a booking that has already started",
            )
        cancelled_by = "guest"
    elif is_provider(user, booking):
        if not can_transition(booking.status, new_status):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status transition")
        cancelled_by = "provider"
    elif new_status == BookingStatus.CANCELLED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status transition")
    else:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the space provider can change the booking status",
        )

    previous = booking.status
    booking.status = new_status

    if new_status == BookingStatus.REJECTED:
        booking.rejection_reason = reason
    elif new_status == BookingStatus.CANCELLED:
        booking.cancellation_reason = reason
        booking.cancelled_at = datetime.utcnow()
        booking.cancelled_by = cancelled_by

    db.commit()
    db.refresh(booking)

    logger.info(f"Booking {booking.id} moved from {previous.value} to {new_status.value} by user {user.id}")

    if new_status == BookingStatus.APPROVED:
        issue_invoice(db, booking)
        db.refresh(booking)

    event = STATUS_EVENTS.get(new_status)
    if event:
        NotificationService().notify_booking_event(db, booking, event)
        db.refresh(booking)

    return booking


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking_data: BookingCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Request a booking; spaces that do not require approval confirm it at once"""
    space, total_hours, tier = validate_booking_request(
        db,
        space_id=booking_data.space_id,
        start_time=booking_data.start_date_time,
        end_time=booking_data.end_date_time,
        pricing_type=booking_data.pricing_type,
        attendee_count=booking_data.attendee_count,
    )
    price = calculate_price(tier, total_hours)

    booking = Booking(
        user_id=current_user.id,
        space_id=space.id,
        start_date_time=booking_data.start_date_time,
        end_date_time=booking_data.end_date_time,
        total_hours=total_hours,
        attendee_count=booking_data.attendee_count,
        event_type=booking_data.event_type,
        company_name=booking_data.company_name or current_user.company_name,
        special_requests=booking_data.special_requests,
        addons=booking_data.addons,
        pricing_type=tier.pricing_type,
        hourly_rate=tier.price,
        total_price=price.total_price,
        status=BookingStatus.PENDING if space.requires_approval else BookingStatus.APPROVED,
    )

    db.add(booking)
    db.commit()
    db.refresh(booking)

    logger.info(f"Booking {booking.id} created on space {space.id} with status {booking.status.value}")

    if booking.status == BookingStatus.APPROVED:
        issue_invoice(db, booking)
    else:
        NotificationService().notify_booking_event(db, booking, NotificationType.BOOKING_REQUESTED)

    db.refresh(booking)
    return booking


@router.get("/", response_model=BookingList)
def list_bookings(
    as_provider: bool = Query(False, description="Bookings on my spaces instead of my own"),
    status: Optional[BookingStatus] = None,
    space_id: Optional[UUID] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """List the current user's bookings, as guest or as provider"""
    query = db.query(Booking)

    if as_provider:
        query = query.join(Space, Booking.space_id == Space.id).filter(Space.user_id == current_user.id)
    else:
        query = query.filter(Booking.user_id == current_user.id)

    if status:
        query = query.filter(Booking.status == status)

    if space_id:
        query = query.filter(Booking.space_id == space_id)

    total = query.count()
    bookings = query.order_by(Booking.start_date_time.desc()).offset(skip).limit(limit).all()

    return {
        "bookings": bookings,
        "total": total,
        "page": (skip // limit) + 1,
        "page_size": limit,
    }


@router.get("/pending-count")
def get_pending_count(
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Number of pending requests on the current user's spaces"""
    if current_user is None:
        return {"count": 0}

    count = (
        db.query(Booking)
        .join(Space, Booking.space_id == Space.id)
        .filter(Space.user_id == current_user.id, Booking.status == BookingStatus.PENDING)
        .count()
    )
    return {"count": count}


@router.get("/check-availability/")
def check_availability(
    space_id: UUID = Query(..., description="Space ID"),
    start_date_time: datetime = Query(..., description="Start time of the booking"),
    end_date_time: datetime = Query(..., description="End time of the booking"),
    db: Session = Depends(get_db),
):
    """Check if a space is free for a time range"""
    start_date_time = to_naive_utc(start_date_time)
    end_date_time = to_naive_utc(end_date_time)

    if booking_hours(start_date_time, end_date_time) <= 0:
        raise HTTPException(status_code=400, detail="Invalid booking duration")

    space = db.query(Space).filter(Space.id == space_id, Space.is_active.is_(True)).first()
    if not space:
        raise HTTPException(status_code=404, detail=f"Space with ID {space_id} not found")

    has_conflict = check_double_booking(
        db=db,
        space_id=space.id,
        start_time=start_date_time,
        end_time=end_date_time,
    )

    return {
        "available": not has_conflict,
        "space_id": space.id,
        "start_date_time": start_date_time,
        "end_date_time": end_date_time,
        "message": ("Space is available" if not has_conflict else "Space is already booked"),
    }


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Get a specific booking"""
    booking = get_booking_or_404(db, booking_id)
    verify_booking_party(current_user, booking)
    return booking


@router.patch("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: UUID,
    booking_data: BookingUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Update booking details or status"""
    booking = get_booking_or_404(db, booking_id)
    verify_booking_party(current_user, booking)

    update_data = booking_data.model_dump(exclude_unset=True)
    detail_changes = {field: update_data[field] for field in GUEST_EDITABLE_FIELDS if field in update_data}

    if detail_changes:
        if not is_guest(current_user, booking):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the guest can edit booking details",
            )
        if booking.has_started:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot modify a booking that has already started",
            )
        if detail_changes.get("attendee_count") is not None:
            check_capacity(booking.space, detail_changes["attendee_count"])

        for field, value in detail_changes.items():
            setattr(booking, field, value)

    new_status = update_data.get("status")
    if new_status is None:
        db.commit()
        db.refresh(booking)
        return booking

    reason = update_data.get("rejection_reason") or update_data.get("cancellation_reason")
    try:
        # Detail edits are committed together with the status change
        booking = change_booking_status(db, booking, current_user, new_status, reason)
    except HTTPException:
        db.rollback()
        raise

    return booking


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Delete a booking together with its invoice and review"""
    booking = get_booking_or_404(db, booking_id)
    verify_booking_party(current_user, booking)

    db.delete(booking)
    db.commit()

    logger.info(f"Booking {booking_id} deleted by user {current_user.id}")
    return {"message": "Booking deleted", "booking_id": booking_id}


@router.post("/{booking_id}/approve", response_model=BookingActionResponse)
def approve_booking(
    booking_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Approve a pending booking request"""
    booking = get_booking_or_404(db, booking_id)
    verify_provider(current_user, booking)

    if booking.status != BookingStatus.PENDING:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Booking is not pending")

    booking = change_booking_status(db, booking, current_user, BookingStatus.APPROVED)
    return {"success": True, "message": "Booking approved", "booking": booking}


@router.post("/{booking_id}/reject", response_model=BookingActionResponse)
def reject_booking(
    booking_id: UUID,
    decision: Optional[BookingDecision] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Reject a pending booking request"""
    booking = get_booking_or_404(db, booking_id)
    verify_provider(current_user, booking)

    if booking.status != BookingStatus.PENDING:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Booking is not pending")

    reason = decision.reason if decision else None
    booking = change_booking_status(db, booking, current_user, BookingStatus.REJECTED, reason)
    return {"success": True, "message": "Booking rejected", "booking": booking}


@router.post("/{booking_id}/cancel", response_model=BookingActionResponse)
def cancel_booking(
    booking_id: UUID,
    decision: Optional[BookingDecision] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Cancel a booking"""
    booking = get_booking_or_404(db, booking_id)
    verify_booking_party(current_user, booking)

    reason = decision.reason if decision else None
    booking = change_booking_status(db, booking, current_user, BookingStatus.CANCELLED, reason)
    return {"success": True, "message": "Booking cancelled", "booking": booking}
