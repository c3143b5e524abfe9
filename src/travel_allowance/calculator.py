"""Sub-allowance calculations: accommodation, meals and private vehicle.

All functions are pure. Amounts are ``Decimal`` rounded half-up to cents, and
malformed inputs (negative nights or kilometres, unknown accommodation types)
degrade to zero instead of raising.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from .models import ZERO, AccommodationSpec, AccommodationType, MealType, TravelType, TripWindow
from .rates import RateTable, default_rate_table, money

SECONDS_PER_HOUR = Decimal("3600")


def accommodation_rate(
    travel_type: TravelType,
    accommodation_type: AccommodationType,
    approved: bool,
    rates: Optional[RateTable] = None,
) -> Decimal:
    """Base nightly rate before uplifts."""
    rates = rates or default_rate_table()
    if travel_type is TravelType.ABORIGINAL_LAND:
        return rates.aboriginal_land_daily_rate

    row = rates.accommodation_row(AccommodationType.parse(accommodation_type), approved)
    if row is None:
        return ZERO
    return row.get(travel_type, ZERO)


def uplifted_rate(
    base_rate: Decimal,
    *,
    remote: bool = False,
    substandard: bool = False,
    short_notice: bool = False,
    rates: Optional[RateTable] = None,
) -> Decimal:
    """Compound the applicable uplifts onto a base rate.

    Order is remote, substandard, short notice; rounding happens once, after
    the last multiplication.
    """
    rates = rates or default_rate_table()
    rate = base_rate
    if remote:
        rate *= rates.remote.factor
    if substandard:
        rate *= rates.substandard.factor
    if short_notice:
        rate *= rates.short_notice.factor
    return money(rate)


def nightly_rate(
    travel_type: TravelType,
    spec: AccommodationSpec,
    rates: Optional[RateTable] = None,
) -> Decimal:
    """Rate charged for a regular night of the stay.

    When the short-notice uplift is limited to the first night it is left out
    here. Aboriginal Land rates never receive uplifts.
    """
    rates = rates or default_rate_table()
    base = accommodation_rate(travel_type, spec.type, spec.approved, rates)
    if travel_type is TravelType.ABORIGINAL_LAND:
        return money(base)
    return uplifted_rate(
        base,
        remote=spec.is_remote,
        substandard=spec.is_substandard,
        short_notice=spec.is_short_notice and not spec.short_notice_first_night_only,
        rates=rates,
    )


def stay_total(
    base_rate: Decimal,
    nights: int,
    spec: AccommodationSpec,
    rates: Optional[RateTable] = None,
) -> Decimal:
    rates = rates or default_rate_table()
    if nights <= 0:
        return ZERO

    regular = uplifted_rate(
        base_rate,
        remote=spec.is_remote,
        substandard=spec.is_substandard,
        short_notice=spec.is_short_notice and not spec.short_notice_first_night_only,
        rates=rates,
    )
    if spec.is_short_notice and spec.short_notice_first_night_only:
        first_night = uplifted_rate(
            base_rate,
            remote=spec.is_remote,
            substandard=spec.is_substandard,
            short_notice=True,
            rates=rates,
        )
        return money(first_night + regular * (nights - 1))
    return money(regular * nights)


def accommodation_total(
    travel_type: TravelType,
    spec: AccommodationSpec,
    business_nights: int,
    rates: Optional[RateTable] = None,
) -> Decimal:
    """Total accommodation entitlement for the trip.

    Aboriginal Land is paid per day (nights + 1) at the fixed daily rate,
    whether or not accommodation was requested.
    """
    rates = rates or default_rate_table()
    if travel_type is TravelType.ABORIGINAL_LAND:
        days = max(0, business_nights) + 1
        return money(rates.aboriginal_land_daily_rate * days)

    if not spec.required or spec.nights <= 0:
        return ZERO

    base = accommodation_rate(travel_type, spec.type, spec.approved, rates)
    return stay_total(base, spec.nights, spec, rates)


def is_distant_location(work_location: str, rates: Optional[RateTable] = None) -> bool:
    rates = rates or default_rate_table()
    location = (work_location or "").lower()
    return not any(keyword in location for keyword in rates.local_location_keywords)


def meals_eligible(
    trip: TripWindow,
    work_location: str,
    rates: Optional[RateTable] = None,
) -> bool:
    """Trips longer than the minimum hours to a distant location earn meals."""
    rates = rates or default_rate_table()
    departs_at = trip.departs_at
    returns_at = trip.returns_at
    if departs_at is None or returns_at is None:
        return False

    trip_hours = Decimal(int((returns_at - departs_at).total_seconds())) / SECONDS_PER_HOUR
    return trip_hours > rates.minimum_trip_hours and is_distant_location(work_location, rates)


def breakfast_eligible(
    departure_time: Optional[time],
    rates: Optional[RateTable] = None,
) -> bool:
    """Departing at least the lead time before the usual start earns breakfast."""
    if departure_time is None:
        return False
    rates = rates or default_rate_table()
    usual_start = datetime.combine(date.min, rates.usual_start_time)
    cutoff = (usual_start - timedelta(hours=rates.breakfast_lead_hours)).time()
    return departure_time <= cutoff


def meals_allowance(
    eligible: bool,
    business_days: int,
    provided_meals: Iterable[MealType],
    breakfast_eligible: bool,
    is_aboriginal_land: bool,
    rates: Optional[RateTable] = None,
) -> Decimal:
    # Aboriginal Land meals are bundled into the daily rate.
    if is_aboriginal_land or not eligible:
        return ZERO

    rates = rates or default_rate_table()
    days = max(0, business_days)
    deduction_per_day = ZERO
    for meal in _known_meals(provided_meals):
        if meal is MealType.BREAKFAST and not breakfast_eligible:
            continue
        deduction_per_day += rates.meal_deductions[meal]

    total = days * rates.meals_daily_rate - days * deduction_per_day
    return money(max(ZERO, total))


def vehicle_allowance(
    use_private_vehicle: bool,
    estimated_km: Decimal | int | float,
    departing_from_approved_location: bool,
    rates: Optional[RateTable] = None,
) -> Decimal:
    if not use_private_vehicle or not departing_from_approved_location:
        return ZERO

    rates = rates or default_rate_table()
    km = Decimal(str(estimated_km or 0))
    if not km.is_finite():
        km = ZERO
    km = max(ZERO, km)
    return money(km * rates.vehicle_rate_per_km)


def _known_meals(provided_meals: Iterable[MealType | str]) -> set[MealType]:
    known = set()
    for meal in provided_meals:
        try:
            known.add(MealType(meal))
        except ValueError:
            continue
    return known


__all__ = [
    "accommodation_rate",
    "accommodation_total",
    "breakfast_eligible",
    "is_distant_location",
    "meals_allowance",
    "meals_eligible",
    "nightly_rate",
    "stay_total",
    "uplifted_rate",
    "vehicle_allowance",
]
