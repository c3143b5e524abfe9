from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Dict, Optional

from .models import (
    AccommodationType,
    BookingFor,
    TransportOption,
    TripPurpose,
    TripSnapshot,
)


class WizardSection(IntEnum):
    TRAVELER = 1
    TRIP_SUMMARY = 2
    DURATION = 3
    ACCOMMODATION = 4
    TRANSPORT = 5
    MEALS = 6
    ALLOWANCES = 7
    PAYMENT = 8
    APPROVAL = 9


@dataclass
class ValidationResult:
    valid: bool
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def blockers(self) -> list[str]:
        return list(self.errors.values())


def validate_snapshot(
    snapshot: TripSnapshot, section: Optional[WizardSection] = None
) -> ValidationResult:
    """Check required fields for one wizard section, or for the whole form."""
    errors: Dict[str, str] = {}
    if section is not None:
        validator = SECTION_VALIDATORS.get(WizardSection(section))
        if validator is not None:
            validator(snapshot, errors)
    else:
        for validator in SECTION_VALIDATORS.values():
            validator(snapshot, errors)
    return ValidationResult(valid=not errors, errors=errors)


TRAVELER_REQUIRED_FIELDS = (
    ("name", "Traveler name is required"),
    ("employee_id", "Employee ID is required"),
    ("mobile_number", "Mobile number is required"),
    ("role", "Role is required"),
)


def _validate_traveler(snapshot: TripSnapshot, errors: Dict[str, str]) -> None:
    if snapshot.booking_for is None:
        errors["booking_for"] = "Please select who this booking is for"
    if snapshot.booking_for is not BookingFor.MYSELF and not snapshot.travelers:
        errors["travelers"] = "Please add at least one traveler"

    for index, traveler in enumerate(snapshot.travelers):
        for field_name, message in TRAVELER_REQUIRED_FIELDS:
            if not getattr(traveler, field_name).strip():
                errors[f"traveler_{index}_{field_name}"] = message


def _validate_trip_summary(snapshot: TripSnapshot, errors: Dict[str, str]) -> None:
    trip = snapshot.trip
    if snapshot.trip_purpose is None:
        errors["trip_purpose"] = "Trip purpose is required"
    elif snapshot.trip_purpose is TripPurpose.OTHER and not snapshot.trip_purpose_other.strip():
        errors["trip_purpose_other"] = "Please specify the trip purpose"
    if not snapshot.work_location.strip():
        errors["work_location"] = "Location of work is required"
    if not snapshot.work_order and not snapshot.cost_centre:
        errors["financials"] = "Either work order or cost centre is required"

    if trip.departure_date is None:
        errors["departure_date"] = "Departure date is required"
    if trip.departure_time is None:
        errors["departure_time"] = "Departure time is required"
    if trip.return_date is None:
        errors["return_date"] = "Return date is required"
    if trip.return_time is None:
        errors["return_time"] = "Return time is required"

    if trip.departure_date is not None and trip.return_date is not None:
        if trip.return_date < trip.departure_date:
            errors["return_date"] = "Return date cannot be before departure date"

    if trip.has_personal_travel and not trip.personal_travel_dates:
        errors["personal_travel_dates"] = "Please specify personal travel dates"
    elif any(not trip.contains(day) for day in trip.personal_travel_dates):
        errors["personal_travel_dates"] = "Personal travel dates must fall within the trip"


def _validate_accommodation(snapshot: TripSnapshot, errors: Dict[str, str]) -> None:
    accommodation = snapshot.accommodation
    if not accommodation.required:
        return

    accommodation_type = AccommodationType.parse(accommodation.type)
    if accommodation_type is AccommodationType.NONE:
        errors["accommodation_type"] = "Please select accommodation type"
    if accommodation_type is AccommodationType.SELF_BOOKED and not accommodation.approved:
        errors["accommodation_approved"] = "Self-booked accommodation requires approval"
    if accommodation.nights <= 0:
        errors["accommodation_nights"] = "Number of nights must be at least 1"


def _validate_transport(snapshot: TripSnapshot, errors: Dict[str, str]) -> None:
    if not snapshot.transport_options:
        errors["transport_options"] = "Please select at least one transport option"

    if TransportOption.FLIGHTS in snapshot.transport_options:
        flights = snapshot.flights
        if not flights.from_location.strip():
            errors["flights_from"] = "Departure location is required"
        if not flights.to_location.strip():
            errors["flights_to"] = "Arrival location is required"
        if flights.departure_date is None:
            errors["flights_departure_date"] = "Flight departure date is required"
        if flights.return_date is None:
            errors["flights_return_date"] = "Flight return date is required"

    if TransportOption.CAR_HIRE in snapshot.transport_options:
        car_hire = snapshot.car_hire
        if not car_hire.pickup_location.strip():
            errors["car_pickup_location"] = "Car pickup location is required"
        if not car_hire.dropoff_location.strip():
            errors["car_dropoff_location"] = "Car dropoff location is required"
        if car_hire.pickup_date is None:
            errors["car_pickup_date"] = "Car pickup date is required"
        if car_hire.dropoff_date is None:
            errors["car_dropoff_date"] = "Car dropoff date is required"

    if TransportOption.FERRY in snapshot.transport_options:
        ferry = snapshot.ferry
        if not ferry.from_location.strip():
            errors["ferry_from"] = "Ferry departure location is required"
        if not ferry.to_location.strip():
            errors["ferry_to"] = "Ferry arrival location is required"
        if ferry.departure_date is None:
            errors["ferry_departure_date"] = "Ferry departure date is required"

    if TransportOption.PRIVATE_VEHICLE in snapshot.transport_options:
        vehicle = snapshot.vehicle
        if not vehicle.estimated_km or vehicle.estimated_km <= 0:
            errors["private_vehicle_km"] = "Estimated kilometers must be greater than 0"
        if not vehicle.departing_from_approved_location:
            errors["private_vehicle_location"] = (
                "Private vehicle must depart from an approved location per EA 7.4.1"
            )


def _validate_payment(snapshot: TripSnapshot, errors: Dict[str, str]) -> None:
    payment = snapshot.payment
    if payment.payment_via is None:
        errors["payment_via"] = "Please select a payment method"
    if payment.advance_payment_required and not payment.authorize_payroll_deduction:
        errors["authorize_payroll_deduction"] = (
            "Please authorize payroll deduction for advance payments"
        )
    if snapshot.receipt_required and payment.receipt_count <= 0:
        errors["receipts"] = "Please upload required receipts"


def _validate_approval(snapshot: TripSnapshot, errors: Dict[str, str]) -> None:
    if not snapshot.declaration:
        errors["declaration"] = "Please agree to the declaration"


SECTION_VALIDATORS: Dict[WizardSection, Callable[[TripSnapshot, Dict[str, str]], None]] = {
    WizardSection.TRAVELER: _validate_traveler,
    WizardSection.TRIP_SUMMARY: _validate_trip_summary,
    WizardSection.ACCOMMODATION: _validate_accommodation,
    WizardSection.TRANSPORT: _validate_transport,
    WizardSection.PAYMENT: _validate_payment,
    WizardSection.APPROVAL: _validate_approval,
}


__all__ = ["SECTION_VALIDATORS", "ValidationResult", "WizardSection", "validate_snapshot"]
