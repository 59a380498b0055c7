"""
Tests for Dashboard Endpoints
"""

import calendar
from datetime import datetime
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from flexispace.models.booking import Booking, BookingStatus
from flexispace.models.review import Review
from flexispace.models.space import Space
from flexispace.models.user import User
from flexispace.services.analytics import business_hours_between, timeframe_bounds, week_start
from test_utils import create_booking, create_space, future_slot


class TestTimeframes:
    """Test timeframe helpers"""

    def test_week_starts_on_monday(self):
        # 2025-06-11 is a Wednesday
        assert week_start(datetime(2025, 6, 11, 15, 30)) == datetime(2025, 6, 9)
        assert week_start(datetime(2025, 6, 9, 0, 0)) == datetime(2025, 6, 9)

    def test_week_bounds(self):
        assert timeframe_bounds("week", datetime(2025, 6, 15, 23, 59)) == (datetime(2025, 6, 9), datetime(2025, 6, 16))

    def test_month_bounds_roll_over_year(self):
        assert timeframe_bounds("month", datetime(2025, 12, 15)) == (datetime(2025, 12, 1), datetime(2026, 1, 1))

    def test_year_bounds(self):
        assert timeframe_bounds("year", datetime(2025, 6, 15)) == (datetime(2025, 1, 1), datetime(2026, 1, 1))

    def test_all_time_unbounded(self):
        assert timeframe_bounds("all", datetime(2025, 6, 15)) == (None, None)

    def test_business_hours_between(self, test_space: Space):
        # Monday 2025-06-09 to Monday 2025-06-16: five 9-hour weekdays
        assert business_hours_between(test_space, datetime(2025, 6, 9).date(), datetime(2025, 6, 16).date()) == 45.0


class TestSpaceStats:
    """Test per-space statistics"""

    def test_stats_per_space(
        self,
        client: TestClient,
        db: Session,
        provider_headers: dict,
        test_space: Space,
        pending_booking: Booking,
        completed_booking: Booking,
        approved_booking: Booking,
    ):
        review = Review(
            user_id=completed_booking.user_id, space_id=test_space.id, booking_id=completed_booking.id, rating=4
        )
        db.add(review)
        db.commit()

        response = client.get("/api/dashboard/stats", headers=provider_headers)
        assert response.status_code == 200

        stats = response.json()[str(test_space.id)]
        assert stats["pending_bookings"] == 1
        assert stats["total_bookings"] == 3
        # Only the paid booking counts
        assert stats["monthly_revenue"] == 100.0
        assert stats["average_rating"] == 4.0

    def test_space_without_reviews(self, client: TestClient, provider_headers: dict, test_space: Space):
        stats = client.get("/api/dashboard/stats", headers=provider_headers).json()[str(test_space.id)]
        assert stats["average_rating"] == 0
        assert stats["total_bookings"] == 0

    def test_guest_has_no_spaces(self, client: TestClient, guest_headers: dict, test_space: Space):
        assert client.get("/api/dashboard/stats", headers=guest_headers).json() == {}

    def test_requires_auth(self, client: TestClient):
        assert client.get("/api/dashboard/stats").status_code == 401


class TestOverview:
    """Test the dashboard overview"""

    def test_overview(
        self,
        client: TestClient,
        provider_headers: dict,
        test_space: Space,
        pending_booking: Booking,
        approved_booking: Booking,
        completed_booking: Booking,
    ):
        response = client.get("/api/dashboard/overview", headers=provider_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["total_spaces"] == 1
        assert data["active_spaces"] == 1
        assert data["total_bookings"] == 3
        assert data["pending_bookings"] == 1
        assert data["upcoming_bookings"] == 1
        assert data["completed_bookings"] == 1
        assert data["monthly_revenue"] == 100.0
        assert data["weekly_revenue"] == 100.0
        assert data["average_rating"] == 0
        assert data["total_reviews"] == 0
        assert data["occupancy_rate"] >= 0

        assert data["popular_spaces"][0]["title"] == test_space.title
        assert data["popular_spaces"][0]["bookings"] == 3
        assert data["popular_spaces"][0]["revenue"] == 200.0
        assert len(data["recent_bookings"]) == 3

    def test_overview_empty(self, client: TestClient, provider_headers: dict):
        data = client.get("/api/dashboard/overview", headers=provider_headers).json()

        assert data["total_spaces"] == 0
        assert data["occupancy_rate"] == 0
        assert data["popular_spaces"] == []
        assert data["recent_bookings"] == []

    def test_other_providers_bookings_excluded(
        self, client: TestClient, db: Session, other_headers: dict, pending_booking: Booking
    ):
        assert client.get("/api/dashboard/overview", headers=other_headers).json()["total_bookings"] == 0


class TestAnalytics:
    """Test booking and revenue analytics"""

    def _bookings(self, db: Session, guest: User, space: Space):
        statuses = [BookingStatus.PENDING, BookingStatus.APPROVED, BookingStatus.COMPLETED, BookingStatus.CANCELLED]
        for days, status in enumerate(statuses, start=3):
            start, end = future_slot(days=days)
            create_booking(db, guest, space, start, end, status=status)

    def test_month_analytics(
        self, client: TestClient, db: Session, provider_headers: dict, guest_user: User, test_space: Space
    ):
        self._bookings(db, guest_user, test_space)

        response = client.get("/api/dashboard/analytics", headers=provider_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["timeframe"] == "month"
        assert data["total_bookings"] == 4
        assert data["total_revenue"] == 200.0
        assert data["total_hours"] == 4.0
        assert data["average_booking_value"] == 50.0
        assert data["conversion_rate"] == 50.0
        assert data["cancellation_rate"] == 25.0
        assert data["status_breakdown"] == {"PENDING": 1, "APPROVED": 1, "REJECTED": 0, "CANCELLED": 1, "COMPLETED": 1}

        now = datetime.utcnow()
        assert len(data["daily"]) == calendar.monthrange(now.year, now.month)[1]
        today = next(entry for entry in data["daily"] if entry["date"] == now.date().isoformat())
        assert today["bookings"] == 4
        assert today["revenue"] == 200.0

        assert data["by_space"] == [
            {"space_id": str(test_space.id), "title": test_space.title, "bookings": 4, "revenue": 200.0, "hours": 4.0}
        ]

    def test_week_has_seven_days(self, client: TestClient, provider_headers: dict):
        data = client.get("/api/dashboard/analytics", params={"timeframe": "week"}, headers=provider_headers).json()

        assert len(data["daily"]) == 7
        assert data["total_bookings"] == 0
        assert data["conversion_rate"] == 0

    def test_all_time_lists_active_days(
        self, client: TestClient, db: Session, provider_headers: dict, guest_user: User, test_space: Space
    ):
        self._bookings(db, guest_user, test_space)

        data = client.get("/api/dashboard/analytics", params={"timeframe": "all"}, headers=provider_headers).json()

        assert data["start"] is None
        assert len(data["daily"]) == 1

    def test_filter_by_space(
        self,
        client: TestClient,
        db: Session,
        provider_headers: dict,
        guest_user: User,
        test_space: Space,
        instant_space: Space,
    ):
        self._bookings(db, guest_user, test_space)

        params = {"timeframe": "year", "space_id": str(instant_space.id)}
        data = client.get("/api/dashboard/analytics", params=params, headers=provider_headers).json()
        assert data["total_bookings"] == 0

    def test_unknown_space(self, client: TestClient, provider_headers: dict):
        response = client.get("/api/dashboard/analytics", params={"space_id": str(uuid4())}, headers=provider_headers)
        assert response.status_code == 404

    def test_someone_elses_space(self, client: TestClient, db: Session, provider_headers: dict, other_user: User):
        space = create_space(db, other_user)

        response = client.get("/api/dashboard/analytics", params={"space_id": str(space.id)}, headers=provider_headers)
        assert response.status_code == 403

    def test_invalid_timeframe(self, client: TestClient, provider_headers: dict):
        response = client.get("/api/dashboard/analytics", params={"timeframe": "decade"}, headers=provider_headers)
        assert response.status_code == 422


class TestAdminStats:
    """Test system-wide statistics"""

    def test_admin_stats(
        self,
        client: TestClient,
        admin_headers: dict,
        guest_user: User,
        pending_booking: Booking,
        approved_booking: Booking,
    ):
        response = client.get("/api/dashboard/admin/stats", headers=admin_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["total_users"] == 3
        assert data["total_providers"] == 1
        assert data["total_spaces"] == 1
        assert data["active_spaces"] == 1
        assert data["total_bookings"] == 2
        assert data["pending_bookings"] == 1
        assert data["total_invoices"] == 1
        assert data["total_bookings_this_month"] == 2
        assert data["total_revenue_this_month"] == 100.0

    def test_providers_refused(self, client: TestClient, provider_headers: dict):
        assert client.get("/api/dashboard/admin/stats", headers=provider_headers).status_code == 403
