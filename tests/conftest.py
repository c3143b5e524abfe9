from datetime import date, time
from decimal import Decimal

import pytest

from travel_allowance import (
    AccommodationSpec,
    AccommodationType,
    MealsSpec,
    MealType,
    TripPurpose,
    TripSnapshot,
    TripWindow,
    VehicleSpec,
    default_rate_table,
)


@pytest.fixture
def rates():
    return default_rate_table()


@pytest.fixture
def site_visit() -> TripSnapshot:
    """Three business nights at a remote mine site, early departure, own car."""
    return TripSnapshot(
        trip=TripWindow(
            departure_date=date(2026, 3, 2),
            departure_time=time(6, 30),
            return_date=date(2026, 3, 5),
            return_time=time(18, 0),
        ),
        trip_purpose=TripPurpose.WORK,
        work_location="Port Hedland mine site",
        work_order="WO-4471",
        accommodation=AccommodationSpec(
            required=True,
            type=AccommodationType.CTM,
            is_remote=True,
        ),
        meals=MealsSpec(provided_meals=frozenset({MealType.LUNCH})),
        vehicle=VehicleSpec(
            use_private_vehicle=True,
            estimated_km=Decimal("120"),
            departing_from_approved_location=True,
        ),
    )
