"""
Invoice Service
Issues invoices for approved bookings and keeps their status current
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from flexispace.config import settings
from flexispace.models.booking import Booking, PaymentStatus
from flexispace.models.invoice import Invoice, InvoiceStatus
from flexispace.services.pricing import split_tax

logger = logging.getLogger(__name__)


def generate_invoice_number(booking: Booking) -> str:
    """``INV-<epoch ms>-<first 8 hex chars of the booking id>``"""
    return f"INV-{int(time.time() * 1000)}-{booking.id.hex[:8].upper()}"


def issue_invoice(db: Session, booking: Booking) -> Invoice:
    """
    Create the invoice of a booking.

    A booking has at most one invoice; if it already exists it is returned
    unchanged.

    Args:
        db: Database session
        booking: An approved booking

    Returns:
        The booking's invoice
    """
    existing = db.query(Invoice).filter(Invoice.booking_id == booking.id).first()
    if existing:
        return existing

    subtotal, taxes = split_tax(booking.total_price)
    guest = booking.user

    invoice = Invoice(
        invoice_number=generate_invoice_number(booking),
        booking_id=booking.id,
        billing_name=booking.company_name or (guest.name if guest else None) or "Customer",
        billing_email=guest.email if guest else "",
        subtotal=subtotal,
        taxes=taxes,
        total=booking.total_price,
        issued_at=datetime.utcnow(),
        due_date=datetime.utcnow() + timedelta(days=settings.INVOICE_DUE_DAYS),
        status=InvoiceStatus.SENT,
    )
    db.add(invoice)
    db.commit()
    db.refresh(invoice)

    logger.info(f"Issued invoice {invoice.invoice_number} for booking {booking.id}")
    return invoice


def mark_invoice_paid(db: Session, invoice: Invoice, paid_at: Optional[datetime] = None) -> Invoice:
    invoice.status = InvoiceStatus.PAID
    invoice.paid_at = paid_at or datetime.utcnow()
    invoice.booking.payment_status = PaymentStatus.PAID
    db.commit()
    db.refresh(invoice)

    logger.info(f"Invoice {invoice.invoice_number} marked as paid")
    return invoice


def mark_overdue_invoices(db: Session, now: Optional[datetime] = None) -> int:
    """
    Move SENT invoices past their due date to OVERDUE.

    Returns:
        Number of invoices updated
    """
    now = now or datetime.utcnow()
    overdue = db.query(Invoice).filter(Invoice.status == InvoiceStatus.SENT, Invoice.due_date < now).all()

    for invoice in overdue:
        invoice.status = InvoiceStatus.OVERDUE

    if overdue:
        db.commit()
        logger.info(f"Marked {len(overdue)} invoice(s) as overdue")

    return len(overdue)
