"""
Pricing Service
Turns a pricing tier and a booking duration into a price
"""

import math
from dataclasses import dataclass
from typing import Tuple

from flexispace.config import settings
from flexispace.models.space import PricingTier, PricingType

# Billable hours in one unit of each non-hourly tier
HOURS_PER_UNIT = {
    PricingType.DAILY: 8,
    PricingType.WEEKLY: 40,
    PricingType.MONTHLY: 160,
}


@dataclass
class PriceBreakdown:
    pricing_type: PricingType
    total_hours: float
    rate: float
    units: float
    base_amount: float
    cleaning_fee: float
    service_fee: float
    total_price: float
    currency: str = "USD"


def booking_hours(start, end) -> float:
    """Duration between two datetimes in hours"""
    return (end - start).total_seconds() / 3600


def billable_units(pricing_type: PricingType, total_hours: float) -> float:
    """
    Number of tier units a booking is charged for.
    Hourly bookings pay for the exact duration; the other tiers round up
    to whole days, weeks or months.
    """
    if pricing_type == PricingType.HOURLY:
        return total_hours
    return math.ceil(total_hours / HOURS_PER_UNIT[pricing_type])


def calculate_price(tier: PricingTier, total_hours: float) -> PriceBreakdown:
    units = billable_units(tier.pricing_type, total_hours)
    base_amount = tier.price * units
    cleaning_fee = tier.cleaning_fee or 0.0
    service_fee = tier.service_fee or 0.0

    return PriceBreakdown(
        pricing_type=tier.pricing_type,
        total_hours=total_hours,
        rate=tier.price,
        units=units,
        base_amount=round(base_amount, 2),
        cleaning_fee=cleaning_fee,
        service_fee=service_fee,
        total_price=round(base_amount + cleaning_fee + service_fee, 2),
        currency=tier.currency or settings.DEFAULT_CURRENCY,
    )


def split_tax(total: float, rate: float = None) -> Tuple[float, float]:
    """
    Split a tax-inclusive total into (subtotal, taxes).

    Taxes are ``total * rate``, so subtotal + taxes == total.
    """
    if rate is None:
        rate = settings.TAX_RATE
    taxes = round(total * rate, 2)
    subtotal = round(total - taxes, 2)
    return subtotal, taxes
