"""
Invoice Pydantic Schemas
Request and response models for Invoice endpoints
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, validator

from flexispace.models.invoice import InvoiceStatus
from flexispace.utils.time import to_naive_utc


class InvoiceUpdate(BaseModel):
    """Schema for updating an invoice"""

    status: Optional[InvoiceStatus] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=5000)

    @validator("paid_at")
    def normalize_paid_at(cls, v):
        return to_naive_utc(v)


class InvoiceResponse(BaseModel):
    """Schema for Invoice responses"""

    id: UUID
    invoice_number: str
    booking_id: UUID

    billing_name: str
    billing_email: str

    subtotal: float
    taxes: float
    total: float

    issued_at: datetime
    due_date: datetime
    paid_at: Optional[datetime] = None

    status: InvoiceStatus
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class InvoiceListItem(InvoiceResponse):
    """Invoice as seen by one party of the booking"""

    space_title: str
    is_incoming: bool  # Caller owns the space
    is_outgoing: bool  # Caller made the booking


# List response
class InvoiceList(BaseModel):
    """Schema for list of invoices"""

    invoices: List[InvoiceListItem]
    total: int
