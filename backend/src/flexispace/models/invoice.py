"""
Invoice Model
Billing record issued once a booking is approved
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Float, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from flexispace.database import Base


class InvoiceStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)

    # One invoice per booking
    booking_id = Column(UUID(as_uuid=True), ForeignKey("bookings.id"), unique=True, nullable=False, index=True)

    billing_name = Column(String(255), nullable=False)
    billing_email = Column(String(255), nullable=False, default="")

    subtotal = Column(Float, nullable=False)
    taxes = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    issued_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    due_date = Column(DateTime, nullable=False)
    paid_at = Column(DateTime)

    status = Column(
        SQLEnum(InvoiceStatus, values_callable=lambda x: [e.value for e in x]),
        default=InvoiceStatus.SENT,
        nullable=False,
        index=True,
    )
    notes = Column(Text)

    booking = relationship("Booking", back_populates="invoice")

    def __repr__(self):
        return f"<Invoice(number='{self.invoice_number}', status='{self.status}', total={self.total})>"
