"""
Invoice API Routes
Invoices seen by guests (outgoing) and space providers (incoming)
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from flexispace.database import get_db
from flexispace.dependencies.auth import get_current_active_user
from flexispace.models.booking import Booking
from flexispace.models.invoice import Invoice, InvoiceStatus
from flexispace.models.notification import NotificationType
from flexispace.models.space import Space
from flexispace.models.user import User
from flexispace.schemas.invoice import InvoiceList, InvoiceResponse, InvoiceUpdate
from flexispace.services.invoice_service import mark_invoice_paid, mark_overdue_invoices
from flexispace.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Invoices"])


def invoice_list_item(invoice: Invoice, user: User) -> dict:
    booking = invoice.booking
    item = InvoiceResponse.model_validate(invoice).model_dump()
    item.update(
        {
            "space_title": booking.space.title,
            "is_incoming": booking.space.user_id == user.id,
            "is_outgoing": booking.user_id == user.id,
        }
    )
    return item


def get_invoice_or_404(db: Session, invoice_id: UUID) -> Invoice:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice with ID {invoice_id} not found",
        )
    return invoice


def verify_invoice_party(user: User, invoice: Invoice) -> None:
    booking = invoice.booking
    if booking.user_id != user.id and booking.space.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: This invoice belongs to another user",
        )


def query_user_invoices(db: Session, user: User, invoice_status: Optional[InvoiceStatus] = None):
    query = (
        db.query(Invoice)
        .join(Booking, Invoice.booking_id == Booking.id)
        .join(Space, Booking.space_id == Space.id)
        .filter(or_(Booking.user_id == user.id, Space.user_id == user.id))
    )
    if invoice_status:
        query = query.filter(Invoice.status == invoice_status)
    return query.order_by(Invoice.issued_at.desc())


@router.get("/", response_model=InvoiceList)
def list_invoices(
    status: Optional[InvoiceStatus] = None,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Invoices of bookings the current user made or received"""
    mark_overdue_invoices(db)

    invoices = query_user_invoices(db, current_user, status).all()

    return {
        "invoices": [invoice_list_item(invoice, current_user) for invoice in invoices],
        "total": len(invoices),
    }


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Get a specific invoice"""
    invoice = get_invoice_or_404(db, invoice_id)
    verify_invoice_party(current_user, invoice)
    return invoice


@router.patch("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(
    invoice_id: UUID,
    invoice_data: InvoiceUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """
    Update an invoice

    Only the space provider can mark an invoice as paid; this also marks the
    booking as paid and notifies the guest.
    """
    invoice = get_invoice_or_404(db, invoice_id)
    verify_invoice_party(current_user, invoice)

    update_data = invoice_data.model_dump(exclude_unset=True)

    if "notes" in update_data:
        invoice.notes = update_data["notes"]

    new_status = update_data.get("status")
    if new_status == InvoiceStatus.PAID:
        if invoice.booking.space.user_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the space provider can mark an invoice as paid",
            )
        invoice = mark_invoice_paid(db, invoice, update_data.get("paid_at"))
        NotificationService().notify_booking_event(db, invoice.booking, NotificationType.INVOICE_PAID)
    else:
        if new_status is not None:
            invoice.status = new_status
        db.commit()

    db.refresh(invoice)
    return invoice
