"""Functional updates of a trip snapshot, one setter per field group.

Setters only record raw wizard inputs. The caller runs ``recalculate``
afterwards to refresh the derived fields.
"""

from __future__ import annotations

from dataclasses import fields, replace
from datetime import date
from decimal import Decimal
from typing import Any

from .models import (
    AccommodationType,
    BookingFor,
    MealType,
    PaymentMethod,
    TransportOption,
    Traveler,
    TripPurpose,
    TripSnapshot,
)

DERIVED_FIELDS = {
    "meals": {"eligible", "breakfast_eligible"},
    "snapshot": {"business_nights", "travel_type", "accommodation_rate", "allowances"},
}

TRIP_DETAIL_FIELDS = {
    "booking_for",
    "trip_purpose",
    "trip_purpose_other",
    "work_location",
    "work_order",
    "cost_centre",
    "cumulative_days",
    "is_aboriginal_land",
    "transport_options",
    "declaration",
}


def update_trip_window(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    if "personal_travel_dates" in changes:
        changes["personal_travel_dates"] = frozenset(changes["personal_travel_dates"])
    return replace(snapshot, trip=_update_group(snapshot.trip, "trip", changes))


def update_trip_details(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    for field_name in changes:
        if field_name in DERIVED_FIELDS["snapshot"]:
            raise ValueError(f"{field_name} is calculated and cannot be set")
        if field_name not in TRIP_DETAIL_FIELDS:
            raise AttributeError(f"Unknown field: {field_name}")
    for field_name, enum_type in (("booking_for", BookingFor), ("trip_purpose", TripPurpose)):
        if field_name in changes:
            changes[field_name] = enum_type(changes[field_name]) if changes[field_name] else None
    if "transport_options" in changes:
        changes["transport_options"] = frozenset(
            TransportOption(option) for option in changes["transport_options"]
        )
    return replace(snapshot, **changes)


def update_accommodation(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    if "type" in changes:
        changes["type"] = AccommodationType.parse(changes["type"])
    return replace(
        snapshot,
        accommodation=_update_group(snapshot.accommodation, "accommodation", changes),
    )


def update_meals(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    if "provided_meals" in changes:
        changes["provided_meals"] = frozenset(MealType(meal) for meal in changes["provided_meals"])
    return replace(snapshot, meals=_update_group(snapshot.meals, "meals", changes))


def update_vehicle(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    if "estimated_km" in changes:
        changes["estimated_km"] = Decimal(str(changes["estimated_km"] or 0))
    return replace(snapshot, vehicle=_update_group(snapshot.vehicle, "vehicle", changes))


def update_payment(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    if changes.get("payment_via"):
        changes["payment_via"] = PaymentMethod(changes["payment_via"])
    elif "payment_via" in changes:
        changes["payment_via"] = None
    return replace(snapshot, payment=_update_group(snapshot.payment, "payment", changes))


def add_traveler(snapshot: TripSnapshot, **details: Any) -> TripSnapshot:
    traveler = _update_group(Traveler(), "traveler", details)
    return replace(snapshot, travelers=snapshot.travelers + (traveler,))


def update_traveler(snapshot: TripSnapshot, index: int, **changes: Any) -> TripSnapshot:
    travelers = list(snapshot.travelers)
    travelers[index] = _update_group(travelers[index], "traveler", changes)
    return replace(snapshot, travelers=tuple(travelers))


def remove_traveler(snapshot: TripSnapshot, index: int) -> TripSnapshot:
    travelers = list(snapshot.travelers)
    del travelers[index]
    return replace(snapshot, travelers=tuple(travelers))


def update_flights(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    return replace(snapshot, flights=_update_group(snapshot.flights, "flights", changes))


def update_car_hire(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    return replace(snapshot, car_hire=_update_group(snapshot.car_hire, "car_hire", changes))


def update_ferry(snapshot: TripSnapshot, **changes: Any) -> TripSnapshot:
    return replace(snapshot, ferry=_update_group(snapshot.ferry, "ferry", changes))


def add_personal_travel_date(snapshot: TripSnapshot, day: date) -> TripSnapshot:
    dates = snapshot.trip.personal_travel_dates | {day}
    return update_trip_window(snapshot, personal_travel_dates=dates, has_personal_travel=True)


def remove_personal_travel_date(snapshot: TripSnapshot, day: date) -> TripSnapshot:
    return update_trip_window(
        snapshot, personal_travel_dates=snapshot.trip.personal_travel_dates - {day}
    )


def toggle_provided_meal(snapshot: TripSnapshot, meal: MealType | str) -> TripSnapshot:
    meal = MealType(meal)
    return update_meals(snapshot, provided_meals=snapshot.meals.provided_meals ^ {meal})


def _update_group(group: Any, group_name: str, changes: dict[str, Any]) -> Any:
    known = {f.name for f in fields(group)}
    for field_name in changes:
        if field_name not in known:
            raise AttributeError(f"Unknown field: {field_name}")
        if field_name in DERIVED_FIELDS.get(group_name, ()):
            raise ValueError(f"{field_name} is calculated and cannot be set")
    return replace(group, **changes)


__all__ = [
    "add_personal_travel_date",
    "add_traveler",
    "remove_personal_travel_date",
    "remove_traveler",
    "toggle_provided_meal",
    "update_accommodation",
    "update_car_hire",
    "update_ferry",
    "update_flights",
    "update_meals",
    "update_payment",
    "update_trip_details",
    "update_traveler",
    "update_trip_window",
    "update_vehicle",
]
