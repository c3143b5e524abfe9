from .engine import AllowanceEngine, recalculate
from .models import (
    AccommodationSpec,
    AccommodationType,
    BookingFor,
    CalculatedAllowances,
    CarHire,
    FerryDetails,
    FlightDetails,
    MealsSpec,
    MealType,
    PaymentMethod,
    PaymentSpec,
    SAPCode,
    TransportOption,
    Traveler,
    TravelType,
    TripPurpose,
    TripSnapshot,
    TripWindow,
    VehicleSpec,
)
from .rates import RateTable, RateTableError, default_rate_table, load_rate_table
from .ui import render_allowance_summary, render_validation_summary
from .validation import ValidationResult, WizardSection, validate_snapshot

__all__ = [
    "AccommodationSpec",
    "AccommodationType",
    "AllowanceEngine",
    "BookingFor",
    "CalculatedAllowances",
    "CarHire",
    "FerryDetails",
    "FlightDetails",
    "MealType",
    "MealsSpec",
    "PaymentMethod",
    "PaymentSpec",
    "RateTable",
    "RateTableError",
    "SAPCode",
    "TransportOption",
    "Traveler",
    "TravelType",
    "TripPurpose",
    "TripSnapshot",
    "TripWindow",
    "ValidationResult",
    "VehicleSpec",
    "WizardSection",
    "default_rate_table",
    "load_rate_table",
    "recalculate",
    "render_allowance_summary",
    "render_validation_summary",
    "validate_snapshot",
]
