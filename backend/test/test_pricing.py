"""
Tests for Pricing Service
"""

from datetime import datetime

import pytest

from flexispace.models.space import PricingTier, PricingType
from flexispace.services.pricing import billable_units, booking_hours, calculate_price, split_tax


class TestBookingHours:
    def test_whole_hours(self):
        assert booking_hours(datetime(2025, 3, 3, 9), datetime(2025, 3, 3, 12)) == 3

    def test_fractional_hours(self):
        assert booking_hours(datetime(2025, 3, 3, 9), datetime(2025, 3, 3, 10, 30)) == 1.5

    def test_negative_range(self):
        assert booking_hours(datetime(2025, 3, 3, 12), datetime(2025, 3, 3, 9)) < 0


class TestBillableUnits:
    @pytest.mark.parametrize(
        "pricing_type, hours, units",
        [
            (PricingType.HOURLY, 2.5, 2.5),
            (PricingType.DAILY, 8, 1),
            (PricingType.DAILY, 9, 2),
            (PricingType.WEEKLY, 40, 1),
            (PricingType.WEEKLY, 41, 2),
            (PricingType.MONTHLY, 100, 1),
        ],
    )
    def test_units(self, pricing_type, hours, units):
        assert billable_units(pricing_type, hours) == units


class TestCalculatePrice:
    def test_hourly(self):
        tier = PricingTier(pricing_type=PricingType.HOURLY, price=45.0, currency="USD")

        price = calculate_price(tier, 2.5)
        assert price.base_amount == 112.5
        assert price.total_price == 112.5
        assert price.rate == 45.0
        assert price.currency == "USD"

    def test_fees_are_added_once(self):
        tier = PricingTier(
            pricing_type=PricingType.DAILY, price=300.0, cleaning_fee=25.0, service_fee=10.0, currency="EUR"
        )

        price = calculate_price(tier, 20)
        assert price.units == 3
        assert price.base_amount == 900.0
        assert price.total_price == 935.0
        assert price.currency == "EUR"


class TestSplitTax:
    def test_default_rate(self):
        assert split_tax(100.0) == (90.0, 10.0)

    def test_custom_rate(self):
        subtotal, taxes = split_tax(200.0, rate=0.25)
        assert taxes == 50.0
        assert subtotal == 150.0

    def test_parts_add_up(self):
        subtotal, taxes = split_tax(123.45)
        assert round(subtotal + taxes, 2) == 123.45
