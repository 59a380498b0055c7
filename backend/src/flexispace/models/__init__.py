"""
Database Models Package
Exports all SQLAlchemy models
"""

from flexispace.models.booking import Booking
from flexispace.models.invoice import Invoice
from flexispace.models.notification import Notification
from flexispace.models.review import Review
from flexispace.models.space import BusinessHour, PricingTier, Space
from flexispace.models.user import User

__all__ = [
    "User",
    "Space",
    "PricingTier",
    "BusinessHour",
    "Booking",
    "Invoice",
    "Review",
    "Notification",
]
