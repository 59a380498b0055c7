"""
Tests for Availability Service and the time slot endpoint
"""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from flexispace.models.booking import BookingStatus
from flexispace.models.space import DayOfWeek, PricingType, Space
from flexispace.models.user import User
from flexispace.services.availability import (
    check_double_booking,
    find_conflicting_booking,
    get_time_slots,
    validate_booking_request,
)
from test_utils import create_booking, future_slot, next_weekday


class TestConflictDetection:
    """Half-open overlap against active bookings"""

    def test_overlap_found(self, db: Session, test_space: Space, pending_booking):
        start = pending_booking.start_date_time + timedelta(minutes=30)

        conflict = find_conflicting_booking(db, test_space.id, start, start + timedelta(hours=1))
        assert conflict.id == pending_booking.id

    def test_containing_range_conflicts(self, db: Session, test_space: Space, pending_booking):
        start = pending_booking.start_date_time - timedelta(hours=1)
        end = pending_booking.end_date_time + timedelta(hours=1)

        assert check_double_booking(db, test_space.id, start, end) is True

    def test_adjacent_ranges_do_not_conflict(self, db: Session, test_space: Space, pending_booking):
        before = pending_booking.start_date_time - timedelta(hours=1)
        after = pending_booking.end_date_time

        assert check_double_booking(db, test_space.id, before, pending_booking.start_date_time) is False
        assert check_double_booking(db, test_space.id, after, after + timedelta(hours=1)) is False

    @pytest.mark.parametrize(
        "status, conflicts",
        [
            (BookingStatus.PENDING, True),
            (BookingStatus.APPROVED, True),
            (BookingStatus.COMPLETED, True),
            (BookingStatus.REJECTED, False),
            (BookingStatus.CANCELLED, False),
        ],
    )
    def test_only_active_statuses_conflict(
        self, db: Session, guest_user: User, test_space: Space, status: BookingStatus, conflicts: bool
    ):
        start, end = future_slot(days=5)
        create_booking(db, guest_user, test_space, start, end, status=status)

        assert check_double_booking(db, test_space.id, start, end) is conflicts

    def test_exclude_booking(self, db: Session, test_space: Space, pending_booking):
        assert (
            check_double_booking(
                db,
                test_space.id,
                pending_booking.start_date_time,
                pending_booking.end_date_time,
                exclude_booking_id=pending_booking.id,
            )
            is False
        )

    def test_other_space_not_affected(self, db: Session, instant_space: Space, pending_booking):
        assert (
            check_double_booking(db, instant_space.id, pending_booking.start_date_time, pending_booking.end_date_time)
            is False
        )


class TestValidateBookingRequest:
    def test_valid_request(self, db: Session, test_space: Space):
        start, end = future_slot(hours=3)

        space, total_hours, tier = validate_booking_request(db, test_space.id, start, end, PricingType.HOURLY, 4)
        assert space.id == test_space.id
        assert total_hours == 3
        assert tier.pricing_type == PricingType.HOURLY

    def test_duration_checked_before_space(self, db: Session):
        start, end = future_slot()

        with pytest.raises(HTTPException) as exc:
            validate_booking_request(db, uuid4(), end, start, PricingType.HOURLY)
        assert exc.value.status_code == 400

    def test_capacity_below_minimum(self, db: Session, test_space: Space):
        test_space.min_capacity = 5
        db.commit()
        start, end = future_slot()

        with pytest.raises(HTTPException) as exc:
            validate_booking_request(db, test_space.id, start, end, PricingType.HOURLY, attendee_count=2)
        assert exc.value.status_code == 400

    def test_conflict_is_409(self, db: Session, test_space: Space, pending_booking):
        with pytest.raises(HTTPException) as exc:
            validate_booking_request(
                db, test_space.id, pending_booking.start_date_time, pending_booking.end_date_time, PricingType.HOURLY
            )
        assert exc.value.status_code == 409

    def test_conflict_check_can_be_skipped(self, db: Session, test_space: Space, pending_booking):
        space, _, _ = validate_booking_request(
            db,
            test_space.id,
            pending_booking.start_date_time,
            pending_booking.end_date_time,
            PricingType.HOURLY,
            check_conflicts=False,
        )
        assert space.id == test_space.id


class TestTimeSlots:
    def test_open_day(self, db: Session, test_space: Space):
        monday = next_weekday(DayOfWeek.MONDAY)

        day_of_week, is_closed, slots = get_time_slots(db, test_space, monday)
        assert day_of_week == DayOfWeek.MONDAY
        assert is_closed is False
        assert len(slots) == 9
        assert slots[0]["display"] == "09:00 - 10:00"
        assert slots[-1]["display"] == "17:00 - 18:00"
        assert all(slot["available"] for slot in slots)

    def test_booked_slots(self, db: Session, guest_user: User, test_space: Space):
        monday = next_weekday(DayOfWeek.MONDAY)
        start = datetime(monday.year, monday.month, monday.day, 10)
        create_booking(db, guest_user, test_space, start, start + timedelta(hours=2), status=BookingStatus.APPROVED)

        _, _, slots = get_time_slots(db, test_space, monday)
        unavailable = [slot["display"] for slot in slots if not slot["available"]]
        assert unavailable == ["10:00 - 11:00", "11:00 - 12:00"]

    def test_past_slots_unavailable(self, db: Session, test_space: Space):
        monday = next_weekday(DayOfWeek.MONDAY)
        now = datetime(monday.year, monday.month, monday.day, 12, 30)

        _, _, slots = get_time_slots(db, test_space, monday, now=now)
        assert [slot["available"] for slot in slots[:4]] == [False, False, False, False]
        assert slots[4]["available"] is True

    def test_closed_day(self, db: Session, test_space: Space):
        _, is_closed, slots = get_time_slots(db, test_space, next_weekday(DayOfWeek.SATURDAY))
        assert is_closed is True
        assert slots == []

    def test_day_without_hours(self, db: Session, test_space: Space):
        _, is_closed, slots = get_time_slots(db, test_space, next_weekday(DayOfWeek.SUNDAY))
        assert is_closed is True
        assert slots == []

    def test_partial_last_slot(self, db: Session, test_space: Space):
        test_space.hours_for(DayOfWeek.TUESDAY).close_time = "12:30"
        db.commit()

        _, _, slots = get_time_slots(db, test_space, next_weekday(DayOfWeek.TUESDAY))
        assert slots[-1]["display"] == "12:00 - 12:30"


class TestAvailabilityEndpoint:
    def test_slots(self, client: TestClient, test_space: Space):
        monday = next_weekday(DayOfWeek.MONDAY)

        response = client.get(f"/api/spaces/{test_space.id}/availability", params={"date": monday.isoformat()})
        assert response.status_code == 200

        data = response.json()
        assert data["day_of_week"] == "MONDAY"
        assert data["is_closed"] is False
        assert len(data["slots"]) == 9

    def test_closed(self, client: TestClient, test_space: Space):
        sunday = next_weekday(DayOfWeek.SUNDAY)

        response = client.get(f"/api/spaces/{test_space.id}/availability", params={"date": sunday.isoformat()})
        assert response.json()["is_closed"] is True

    def test_missing_date(self, client: TestClient, test_space: Space):
        response = client.get(f"/api/spaces/{test_space.id}/availability")
        assert response.status_code == 422

    def test_inactive_space(self, client: TestClient, db: Session, test_space: Space):
        test_space.is_active = False
        db.commit()

        monday = next_weekday(DayOfWeek.MONDAY)
        response = client.get(f"/api/spaces/{test_space.id}/availability", params={"date": monday.isoformat()})
        assert response.status_code == 404
