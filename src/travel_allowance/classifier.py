from __future__ import annotations

from typing import Optional

from .models import TravelType, TripWindow
from .rates import RateTable, default_rate_table


def calendar_nights(trip: TripWindow) -> int:
    """Whole-day difference between return and departure dates."""
    if trip.departure_date is None or trip.return_date is None:
        return 0
    return (trip.return_date - trip.departure_date).days


def business_nights(trip: TripWindow) -> int:
    """Calendar nights minus declared personal travel days, never below zero.

    Personal dates outside the trip window do not reduce the count.
    """
    personal_days = sum(1 for day in trip.personal_travel_dates if trip.contains(day))
    return max(0, calendar_nights(trip) - personal_days)


def classify(
    nights: int,
    cumulative_days: int,
    is_aboriginal_land: bool,
    rates: Optional[RateTable] = None,
) -> TravelType:
    """Classify a trip.

    ``cumulative_days`` must already include the nights of the trip being
    classified. Aboriginal Land overrides every duration rule.
    """
    if is_aboriginal_land:
        return TravelType.ABORIGINAL_LAND

    rates = rates or default_rate_table()
    nights = max(0, nights or 0)
    cumulative_days = max(0, cumulative_days or 0)

    if nights >= rates.reportable_lafha_nights:
        return TravelType.REPORTABLE_LAFHA
    if nights >= rates.long_stay_nights or cumulative_days >= rates.long_stay_cumulative_days:
        return TravelType.LONG_STAY
    return TravelType.SHORT_STAY


__all__ = ["business_nights", "calendar_nights", "classify"]
