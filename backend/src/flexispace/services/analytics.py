"""
Analytics Service
Dashboard statistics for space providers and the platform
"""

from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func
from sqlalchemy.orm import Query, Session

from flexispace.models.booking import REVENUE_BOOKING_STATUSES, Booking, BookingStatus, PaymentStatus
from flexispace.models.invoice import Invoice
from flexispace.models.review import Review
from flexispace.models.space import DayOfWeek, Space
from flexispace.models.user import User, UserType
from flexispace.utils.time import month_start, next_month_start

TIMEFRAMES = ["week", "month", "year", "all"]


def week_start(now: datetime) -> datetime:
    """Monday 00:00 of the current week"""
    day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return day - timedelta(days=day.weekday())


def timeframe_bounds(timeframe: str, now: datetime) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Half-open ``[start, end)`` of a timeframe; ``(None, None)`` for all time"""
    if timeframe == "week":
        start = week_start(now)
        return start, start + timedelta(days=7)
    if timeframe == "month":
        return month_start(now), next_month_start(now)
    if timeframe == "year":
        return datetime(now.year, 1, 1), datetime(now.year + 1, 1, 1)
    return None, None


def _provider_bookings(db: Session, user: User) -> Query:
    return db.query(Booking).join(Space, Booking.space_id == Space.id).filter(Space.user_id == user.id)


def _revenue(query: Query) -> float:
    """Sum of total_price of the bookings a query selects"""
    result = query.with_entities(func.coalesce(func.sum(Booking.total_price), 0)).scalar()
    return round(float(result or 0), 2)


def business_hours_between(space: Space, start: date, end: date) -> float:
    """Opening hours of a space over ``[start, end)``"""
    total = 0.0
    day = start
    while day < end:
        hours = space.hours_for(DayOfWeek.from_date(day))
        if hours is not None:
            total += hours.open_hours
        day += timedelta(days=1)
    return total


def space_stats(db: Session, user: User, now: Optional[datetime] = None) -> Dict[str, Dict[str, Any]]:
    """
    Per-space figures for a provider's spaces, keyed by space id.
    Monthly revenue only counts paid bookings created this month.
    """
    now = now or datetime.utcnow()
    start, end = month_start(now), next_month_start(now)

    stats = {}
    for space in db.query(Space).filter(Space.user_id == user.id).all():
        monthly_revenue = sum(
            booking.total_price
            for booking in space.bookings
            if booking.status in REVENUE_BOOKING_STATUSES
            and booking.payment_status == PaymentStatus.PAID
            and start <= booking.created_at < end
        )
        stats[str(space.id)] = {
            "pending_bookings": sum(1 for b in space.bookings if b.status == BookingStatus.PENDING),
            "total_bookings": len(space.bookings),
            "monthly_revenue": round(monthly_revenue, 2),
            "average_rating": space.average_rating or 0,
        }
    return stats


def provider_overview(db: Session, user: User, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Headline figures of the provider dashboard"""
    now = now or datetime.utcnow()
    this_month, following_month = month_start(now), next_month_start(now)
    this_week = week_start(now)

    spaces = db.query(Space).filter(Space.user_id == user.id).all()
    bookings = _provider_bookings(db, user)

    paid_revenue = bookings.filter(
        and_(
            Booking.status.in_(REVENUE_BOOKING_STATUSES),
            Booking.payment_status == PaymentStatus.PAID,
        )
    )
    monthly_revenue = _revenue(
        paid_revenue.filter(Booking.created_at >= this_month, Booking.created_at < following_month)
    )
    weekly_revenue = _revenue(paid_revenue.filter(Booking.created_at >= this_week))

    rating_query = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .select_from(Review)
        .join(Space, Review.space_id == Space.id)
    )
    average_rating, total_reviews = rating_query.filter(Space.user_id == user.id).one()

    # Occupancy: booked hours this month against the opening hours of active spaces
    booked_hours = (
        bookings.filter(
            Booking.status.in_(REVENUE_BOOKING_STATUSES),
            Booking.start_date_time >= this_month,
            Booking.start_date_time < following_month,
        )
        .with_entities(func.coalesce(func.sum(Booking.total_hours), 0))
        .scalar()
    )
    available_hours = sum(
        business_hours_between(space, this_month.date(), following_month.date()) for space in spaces if space.is_active
    )
    occupancy_rate = round(float(booked_hours or 0) / available_hours * 100, 1) if available_hours else 0

    popular = sorted(spaces, key=lambda s: len(s.bookings), reverse=True)[:5]
    popular_spaces = [
        {
            "id": space.id,
            "title": space.title,
            "image_src": space.image_src,
            "bookings": len(space.bookings),
            "revenue": round(
                sum(b.total_price for b in space.bookings if b.status in REVENUE_BOOKING_STATUSES), 2
            ),
        }
        for space in popular
    ]

    return {
        "total_spaces": len(spaces),
        "active_spaces": sum(1 for space in spaces if space.is_active),
        "total_bookings": bookings.count(),
        "pending_bookings": bookings.filter(Booking.status == BookingStatus.PENDING).count(),
        "upcoming_bookings": bookings.filter(
            Booking.status == BookingStatus.APPROVED, Booking.start_date_time > now
        ).count(),
        "completed_bookings": bookings.filter(Booking.status == BookingStatus.COMPLETED).count(),
        "monthly_revenue": monthly_revenue,
        "weekly_revenue": weekly_revenue,
        "average_rating": round(float(average_rating), 2) if average_rating is not None else 0,
        "total_reviews": total_reviews,
        "occupancy_rate": occupancy_rate,
        "popular_spaces": popular_spaces,
        "recent_bookings": bookings.order_by(Booking.created_at.desc()).limit(5).all(),
    }


def provider_analytics(
    db: Session,
    user: User,
    timeframe: str = "month",
    space_id: Optional[UUID] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Booking and revenue analytics over a timeframe (by booking creation date)

    Args:
        db: Database session
        user: The provider
        timeframe: week, month, year or all
        space_id: Restrict to one of the provider's spaces
        now: Reference time

    Returns:
        Totals, rates, a status breakdown, a daily series and per-space figures
    """
    now = now or datetime.utcnow()
    start, end = timeframe_bounds(timeframe, now)

    query = _provider_bookings(db, user)
    if space_id:
        query = query.filter(Booking.space_id == space_id)
    if start is not None:
        query = query.filter(Booking.created_at >= start, Booking.created_at < end)

    bookings: List[Booking] = query.order_by(Booking.created_at).all()
    earning = [b for b in bookings if b.status in REVENUE_BOOKING_STATUSES]

    total_bookings = len(bookings)
    total_revenue = round(sum(b.total_price for b in earning), 2)
    cancelled = sum(1 for b in bookings if b.status == BookingStatus.CANCELLED)

    # Daily series: every day of a week or month, only active days otherwise
    daily = OrderedDict()
    if timeframe in ("week", "month"):
        day = start.date()
        while day < end.date():
            daily[day.isoformat()] = {"date": day.isoformat(), "bookings": 0, "revenue": 0.0}
            day += timedelta(days=1)
    for booking in bookings:
        key = booking.created_at.date().isoformat()
        entry = daily.setdefault(key, {"date": key, "bookings": 0, "revenue": 0.0})
        entry["bookings"] += 1
        if booking.status in REVENUE_BOOKING_STATUSES:
            entry["revenue"] = round(entry["revenue"] + booking.total_price, 2)

    by_space = OrderedDict()
    for booking in bookings:
        entry = by_space.setdefault(
            booking.space_id,
            {"space_id": booking.space_id, "title": booking.space.title, "bookings": 0, "revenue": 0.0, "hours": 0.0},
        )
        entry["bookings"] += 1
        if booking.status in REVENUE_BOOKING_STATUSES:
            entry["revenue"] = round(entry["revenue"] + booking.total_price, 2)
            entry["hours"] += booking.total_hours

    return {
        "timeframe": timeframe,
        "start": start,
        "end": end,
        "total_bookings": total_bookings,
        "total_revenue": total_revenue,
        "total_hours": round(sum(b.total_hours for b in earning), 2),
        "average_booking_value": round(total_revenue / total_bookings, 2) if total_bookings else 0,
        "conversion_rate": round(len(earning) / total_bookings * 100, 1) if total_bookings else 0,
        "cancellation_rate": round(cancelled / total_bookings * 100, 1) if total_bookings else 0,
        "status_breakdown": {
            status.value: sum(1 for b in bookings if b.status == status) for status in BookingStatus
        },
        "daily": sorted(daily.values(), key=lambda entry: entry["date"]),
        "by_space": list(by_space.values()),
    }


def platform_stats(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    """System-wide statistics for admins"""
    now = now or datetime.utcnow()
    this_month = month_start(now)

    bookings_this_month = db.query(Booking).filter(Booking.created_at >= this_month)

    return {
        "total_users": db.query(User).count(),
        "total_providers": db.query(User).filter(User.user_type == UserType.PROVIDER).count(),
        "total_spaces": db.query(Space).count(),
        "active_spaces": db.query(Space).filter(Space.is_active.is_(True)).count(),
        "total_bookings": db.query(Booking).count(),
        "pending_bookings": db.query(Booking).filter(Booking.status == BookingStatus.PENDING).count(),
        "total_invoices": db.query(Invoice).count(),
        "total_bookings_this_month": bookings_this_month.count(),
        "total_revenue_this_month": _revenue(bookings_this_month.filter(Booking.status.in_(REVENUE_BOOKING_STATUSES))),
    }
