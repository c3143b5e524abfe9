from dataclasses import replace
from datetime import date
from decimal import Decimal

from travel_allowance import (
    AccommodationSpec,
    AccommodationType,
    BookingFor,
    CarHire,
    FerryDetails,
    FlightDetails,
    PaymentMethod,
    PaymentSpec,
    TransportOption,
    Traveler,
    TripPurpose,
    TripSnapshot,
    VehicleSpec,
    WizardSection,
    recalculate,
    render_allowance_summary,
    render_validation_summary,
    validate_snapshot,
)


def test_trip_summary_complete(site_visit):
    result = validate_snapshot(recalculate(site_visit), WizardSection.TRIP_SUMMARY)

    assert result.valid
    assert result.errors == {}


def test_trip_summary_missing_fields():
    result = validate_snapshot(TripSnapshot(), WizardSection.TRIP_SUMMARY)

    assert not result.valid
    assert set(result.errors) == {
        "trip_purpose",
        "work_location",
        "financials",
        "departure_date",
        "departure_time",
        "return_date",
        "return_time",
    }


def test_other_trip_purpose_needs_description(site_visit):
    other = replace(site_visit, trip_purpose=TripPurpose.OTHER)
    described = replace(other, trip_purpose_other="Community consultation")

    result = validate_snapshot(other, WizardSection.TRIP_SUMMARY)

    assert result.errors == {"trip_purpose_other": "Please specify the trip purpose"}
    assert validate_snapshot(described, WizardSection.TRIP_SUMMARY).valid


def test_traveler_section_requires_booking_choice():
    result = validate_snapshot(TripSnapshot(), WizardSection.TRAVELER)

    assert result.errors == {
        "booking_for": "Please select who this booking is for",
        "travelers": "Please add at least one traveler",
    }
    assert validate_snapshot(
        TripSnapshot(booking_for=BookingFor.MYSELF), WizardSection.TRAVELER
    ).valid


def test_group_booking_checks_each_traveler():
    snapshot = TripSnapshot(
        booking_for=BookingFor.GROUP,
        travelers=(
            Traveler(
                name="Alex Ward",
                employee_id="E1042",
                mobile_number="0400 111 222",
                role="Fitter",
            ),
            Traveler(name="Jo Reid", role="Electrician"),
        ),
    )
    result = validate_snapshot(snapshot, WizardSection.TRAVELER)

    assert result.errors == {
        "traveler_1_employee_id": "Employee ID is required",
        "traveler_1_mobile_number": "Mobile number is required",
    }
    assert "travelers" in validate_snapshot(
        TripSnapshot(booking_for=BookingFor.SOMEONE_ELSE), WizardSection.TRAVELER
    ).errors


def test_return_before_departure(site_visit):
    trip = replace(site_visit.trip, return_date=date(2026, 3, 1))
    result = validate_snapshot(replace(site_visit, trip=trip), WizardSection.TRIP_SUMMARY)

    assert result.errors == {"return_date": "Return date cannot be before departure date"}


def test_personal_travel_dates(site_visit):
    flagged = replace(site_visit.trip, has_personal_travel=True)
    outside = replace(site_visit.trip, personal_travel_dates=frozenset({date(2026, 4, 1)}))

    missing = validate_snapshot(replace(site_visit, trip=flagged), WizardSection.TRIP_SUMMARY)
    stray = validate_snapshot(replace(site_visit, trip=outside), WizardSection.TRIP_SUMMARY)

    assert missing.errors["personal_travel_dates"] == "Please specify personal travel dates"
    assert stray.errors["personal_travel_dates"] == "Personal travel dates must fall within the trip"


def test_accommodation_section():
    snapshot = TripSnapshot(
        accommodation=AccommodationSpec(required=True, type=AccommodationType.SELF_BOOKED)
    )
    result = validate_snapshot(recalculate(snapshot), WizardSection.ACCOMMODATION)

    assert set(result.errors) == {"accommodation_approved", "accommodation_nights"}
    assert validate_snapshot(TripSnapshot(), WizardSection.ACCOMMODATION).valid


def test_transport_section():
    snapshot = TripSnapshot(
        transport_options=frozenset({TransportOption.PRIVATE_VEHICLE}),
        vehicle=VehicleSpec(use_private_vehicle=True, estimated_km=Decimal("0")),
    )
    result = validate_snapshot(snapshot, WizardSection.TRANSPORT)

    assert set(result.errors) == {"private_vehicle_km", "private_vehicle_location"}
    assert "EA 7.4.1" in result.errors["private_vehicle_location"]
    assert "transport_options" in validate_snapshot(TripSnapshot(), WizardSection.TRANSPORT).errors


def test_transport_details_required_per_option():
    options = frozenset({TransportOption.FLIGHTS, TransportOption.CAR_HIRE, TransportOption.FERRY})
    result = validate_snapshot(TripSnapshot(transport_options=options), WizardSection.TRANSPORT)

    assert not result.valid
    assert set(result.errors) == {
        "flights_from",
        "flights_to",
        "flights_departure_date",
        "flights_return_date",
        "car_pickup_location",
        "car_dropoff_location",
        "car_pickup_date",
        "car_dropoff_date",
        "ferry_from",
        "ferry_to",
        "ferry_departure_date",
    }


def test_transport_details_complete():
    snapshot = TripSnapshot(
        transport_options=frozenset(
            {TransportOption.FLIGHTS, TransportOption.CAR_HIRE, TransportOption.FERRY}
        ),
        flights=FlightDetails(
            from_location="Perth",
            to_location="Broome",
            departure_date=date(2026, 5, 4),
            return_date=date(2026, 5, 8),
        ),
        car_hire=CarHire(
            pickup_location="Broome Airport",
            dropoff_location="Broome Airport",
            pickup_date=date(2026, 5, 4),
            dropoff_date=date(2026, 5, 8),
        ),
        ferry=FerryDetails(
            from_location="Broome",
            to_location="Cockatoo Island",
            departure_date=date(2026, 5, 5),
        ),
    )

    assert validate_snapshot(snapshot, WizardSection.TRANSPORT).valid


def test_payment_section_needs_receipts_when_required(site_visit):
    snapshot = replace(
        recalculate(site_visit),
        payment=PaymentSpec(payment_via=PaymentMethod.REIMBURSEMENT, advance_payment_required=True),
    )
    result = validate_snapshot(snapshot, WizardSection.PAYMENT)

    assert set(result.errors) == {"authorize_payroll_deduction", "receipts"}

    paid = replace(
        snapshot,
        payment=replace(snapshot.payment, authorize_payroll_deduction=True, receipt_count=2),
    )
    assert validate_snapshot(paid, WizardSection.PAYMENT).valid


def test_sections_without_rules_are_valid():
    assert validate_snapshot(TripSnapshot(), WizardSection.MEALS).valid
    assert validate_snapshot(TripSnapshot(), WizardSection.ALLOWANCES).valid


def test_whole_form_collects_every_section():
    result = validate_snapshot(TripSnapshot())

    assert not result.valid
    for field_name in (
        "booking_for",
        "trip_purpose",
        "work_location",
        "transport_options",
        "payment_via",
        "declaration",
    ):
        assert field_name in result.errors


def test_render_validation_summary():
    failing = validate_snapshot(TripSnapshot(), WizardSection.APPROVAL)
    passing = validate_snapshot(replace(TripSnapshot(), declaration=True), WizardSection.APPROVAL)

    assert "Please agree to the declaration" in render_validation_summary(failing)
    assert "validation-summary error" in render_validation_summary(failing)
    assert "Ready to continue" in render_validation_summary(passing)


def test_render_allowance_summary(site_visit):
    html = render_allowance_summary(recalculate(replace(site_visit, is_aboriginal_land=True)).allowances)

    assert "Aboriginal Land Allowance" in html
    assert "badge-outline" in html
    assert "OR12 &ndash; Aboriginal Lands Allowance" in html
    assert "$1235.20" in html


def test_reportable_lafha_uses_destructive_badge(site_visit):
    trip = replace(site_visit.trip, return_date=date(2027, 3, 10))
    html = render_allowance_summary(recalculate(replace(site_visit, trip=trip)).allowances)

    assert "Reportable LAFHA" in html
    assert "badge-destructive" in html
    assert "FBT applicable" in html
