"""
Server-rendered pages

Each page renders a Jinja2 template from ``flexispace/templates``. Pages that
need a signed-in user render ``auth_required.html`` (401) for anonymous
visitors; missing or foreign resources render ``not_found.html`` (404).
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from flexispace.config import settings
from flexispace.database import get_db
from flexispace.dependencies.auth import get_optional_user
from flexispace.models.booking import Booking, BookingStatus
from flexispace.models.invoice import Invoice
from flexispace.models.space import (
    CANCELLATION_POLICY_TEXT,
    EVENT_VENUE_CATEGORIES,
    WORKSPACE_CATEGORIES,
    DayOfWeek,
    Space,
)
from flexispace.models.user import User
from flexispace.routes.favorite import favorite_spaces
from flexispace.routes.invoice import invoice_list_item, query_user_invoices
from flexispace.routes.space import search_spaces
from flexispace.services.analytics import TIMEFRAMES, provider_analytics, provider_overview, space_stats
from flexispace.services.invoice_service import mark_overdue_invoices

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

router = APIRouter(tags=["Pages"], include_in_schema=False)


def format_currency(value, currency: str = "USD") -> str:
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{float(value or 0):,.2f}"


def format_datetime(value: Optional[datetime], fmt: str = "%b %d, %Y %H:%M") -> str:
    return value.strftime(fmt) if value else ""


def status_class(value) -> str:
    """CSS class of a status badge"""
    return f"status-{str(getattr(value, 'value', value)).lower()}"


def status_label(value) -> str:
    return str(getattr(value, "value", value)).replace("_", " ").title()


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["app_name"] = settings.APP_NAME
templates.env.filters["currency"] = format_currency
templates.env.filters["datetime"] = format_datetime
templates.env.filters["status_class"] = status_class
templates.env.filters["status_label"] = status_label


def render(request: Request, name: str, status_code: int = 200, **context) -> HTMLResponse:
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def auth_required(request: Request, page: str) -> HTMLResponse:
    return render(request, "auth_required.html", status_code=401, page=page, current_user=None)


def not_found(request: Request, current_user: Optional[User], message: str = "Page not found") -> HTMLResponse:
    return render(request, "not_found.html", status_code=404, current_user=current_user, message=message)


@router.get("/", response_class=HTMLResponse)
def index_page(
    request: Request,
    category: Optional[str] = None,
    city: Optional[str] = None,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Listing grid"""
    spaces, total = search_spaces(db, category=category, city=city, limit=48)

    return render(
        request,
        "index.html",
        page="home",
        current_user=current_user,
        spaces=spaces,
        total=total,
        category=category,
        city=city,
        workspace_categories=WORKSPACE_CATEGORIES,
        event_venue_categories=EVENT_VENUE_CATEGORIES,
        favorite_ids=(current_user.favorite_ids or []) if current_user else [],
    )


@router.get("/spaces/{space_id}", response_class=HTMLResponse)
def space_page(
    request: Request,
    space_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Space detail"""
    space = db.query(Space).filter(Space.id == space_id).first()
    if not space or (not space.is_active and (current_user is None or current_user.id != space.user_id)):
        return not_found(request, current_user, "This space does not exist or is no longer listed")

    hours_by_day = [(day, space.hours_for(day)) for day in DayOfWeek]

    return render(
        request,
        "space_detail.html",
        page="space",
        current_user=current_user,
        space=space,
        hours_by_day=hours_by_day,
        policy_text=CANCELLATION_POLICY_TEXT.get(space.cancellation_policy),
        is_favorite=bool(current_user and str(space.id) in (current_user.favorite_ids or [])),
        is_owner=bool(current_user and current_user.id == space.user_id),
    )


@router.get("/trips", response_class=HTMLResponse)
def trips_page(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """The current user's bookings"""
    if current_user is None:
        return auth_required(request, "trips")

    bookings = (
        db.query(Booking).filter(Booking.user_id == current_user.id).order_by(Booking.start_date_time.desc()).all()
    )
    return render(
        request, "trips.html", page="trips", current_user=current_user, bookings=bookings, now=datetime.utcnow()
    )


@router.get("/reservations", response_class=HTMLResponse)
def reservations_page(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Bookings on the current user's spaces"""
    if current_user is None:
        return auth_required(request, "reservations")

    bookings = (
        db.query(Booking)
        .join(Space, Booking.space_id == Space.id)
        .filter(Space.user_id == current_user.id)
        .order_by(Booking.start_date_time.desc())
        .all()
    )
    pending_count = sum(1 for booking in bookings if booking.status == BookingStatus.PENDING)

    return render(
        request,
        "reservations.html",
        page="reservations",
        current_user=current_user,
        bookings=bookings,
        pending_count=pending_count,
    )


@router.get("/invoices", response_class=HTMLResponse)
def invoices_page(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if current_user is None:
        return auth_required(request, "invoices")

    mark_overdue_invoices(db)
    invoices = [invoice_list_item(invoice, current_user) for invoice in query_user_invoices(db, current_user).all()]

    return render(request, "invoices.html", page="invoices", current_user=current_user, invoices=invoices)


@router.get("/invoices/{invoice_id}", response_class=HTMLResponse)
def invoice_page(
    request: Request,
    invoice_id: UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Printable invoice"""
    if current_user is None:
        return auth_required(request, "invoices")

    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if invoice is None or current_user.id not in (invoice.booking.user_id, invoice.booking.space.user_id):
        return not_found(request, current_user, "Invoice not found")

    company = {
        "name": settings.COMPANY_NAME,
        "address": settings.COMPANY_ADDRESS,
        "phone": settings.COMPANY_PHONE,
        "email": settings.COMPANY_EMAIL,
        "tax_id": settings.COMPANY_TAX_ID,
    }

    return render(
        request,
        "invoice_detail.html",
        page="invoices",
        current_user=current_user,
        invoice=invoice,
        booking=invoice.booking,
        company=company,
        tax_rate=settings.TAX_RATE,
    )


@router.get("/favorites", response_class=HTMLResponse)
def favorites_page(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if current_user is None:
        return auth_required(request, "favorites")

    return render(
        request,
        "favorites.html",
        page="favorites",
        current_user=current_user,
        spaces=favorite_spaces(db, current_user),
    )


@router.get("/properties", response_class=HTMLResponse)
def properties_page(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """The current user's listed spaces"""
    if current_user is None:
        return auth_required(request, "properties")

    spaces = db.query(Space).filter(Space.user_id == current_user.id).order_by(Space.created_at.desc()).all()
    return render(request, "properties.html", page="properties", current_user=current_user, spaces=spaces)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if current_user is None:
        return auth_required(request, "dashboard")

    spaces = db.query(Space).filter(Space.user_id == current_user.id).order_by(Space.created_at.desc()).all()

    return render(
        request,
        "dashboard.html",
        page="dashboard",
        current_user=current_user,
        overview=provider_overview(db, current_user),
        spaces=spaces,
        stats=space_stats(db, current_user),
    )


@router.get("/analytics", response_class=HTMLResponse)
def analytics_page(
    request: Request,
    timeframe: str = Query("month", pattern="^(week|month|year|all)$"),
    space_id: Optional[UUID] = None,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    if current_user is None:
        return auth_required(request, "analytics")

    spaces = db.query(Space).filter(Space.user_id == current_user.id).order_by(Space.title).all()
    if space_id and space_id not in [space.id for space in spaces]:
        return not_found(request, current_user, "Space not found")

    return render(
        request,
        "analytics.html",
        page="analytics",
        current_user=current_user,
        analytics=provider_analytics(db, current_user, timeframe=timeframe, space_id=space_id),
        timeframes=TIMEFRAMES,
        spaces=spaces,
        space_id=space_id,
    )
