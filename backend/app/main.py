from __future__ import annotations

import logging
from datetime import date, time
from decimal import Decimal
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from travel_allowance import (
    AccommodationSpec,
    AccommodationType,
    AllowanceEngine,
    BookingFor,
    CarHire,
    FerryDetails,
    FlightDetails,
    MealsSpec,
    MealType,
    PaymentMethod,
    PaymentSpec,
    RateTable,
    TransportOption,
    Traveler,
    TripPurpose,
    TripSnapshot,
    TripWindow,
    VehicleSpec,
    WizardSection,
    default_rate_table,
    load_rate_table,
    validate_snapshot,
)

from backend.app.config import get_settings

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Travel Allowance API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TravelerIn(BaseModel):
    name: str = ""
    employee_id: str = ""
    mobile_number: str = ""
    role: str = ""


class TripWindowIn(BaseModel):
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    has_personal_travel: bool = False
    personal_travel_dates: list[date] = Field(default_factory=list)


class AccommodationIn(BaseModel):
    required: bool = False
    # Free text: unknown values resolve to no accommodation rate.
    type: str = ""
    approved: bool = False
    nights: int = 0
    is_remote: bool = False
    is_substandard: bool = False
    is_short_notice: bool = False
    short_notice_first_night_only: bool = False


class VehicleIn(BaseModel):
    use_private_vehicle: bool = False
    estimated_km: Decimal = Decimal("0")
    departing_from_approved_location: bool = False
    start_location: str = ""
    end_location: str = ""


class FlightsIn(BaseModel):
    from_location: str = ""
    to_location: str = ""
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    frequent_flyer_number: str = ""
    seat_preferences: str = ""
    notes: str = ""


class CarHireIn(BaseModel):
    pickup_location: str = ""
    dropoff_location: str = ""
    pickup_date: Optional[date] = None
    pickup_time: Optional[time] = None
    dropoff_date: Optional[date] = None
    dropoff_time: Optional[time] = None
    vehicle_type: str = ""


class FerryIn(BaseModel):
    from_location: str = ""
    to_location: str = ""
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    vehicle_on_board: bool = False


class PaymentIn(BaseModel):
    payment_via: Optional[PaymentMethod] = None
    advance_payment_required: bool = False
    authorize_payroll_deduction: bool = False
    receipt_count: int = 0


class TripSnapshotIn(BaseModel):
    booking_for: Optional[BookingFor] = None
    travelers: list[TravelerIn] = Field(default_factory=list)
    trip: TripWindowIn = Field(default_factory=TripWindowIn)
    trip_purpose: Optional[TripPurpose] = None
    trip_purpose_other: str = ""
    work_location: str = ""
    work_order: str = ""
    cost_centre: str = ""
    cumulative_days: int = 0
    is_aboriginal_land: bool = False
    accommodation: AccommodationIn = Field(default_factory=AccommodationIn)
    provided_meals: list[MealType] = Field(default_factory=list)
    vehicle: VehicleIn = Field(default_factory=VehicleIn)
    transport_options: list[TransportOption] = Field(default_factory=list)
    flights: FlightsIn = Field(default_factory=FlightsIn)
    car_hire: CarHireIn = Field(default_factory=CarHireIn)
    ferry: FerryIn = Field(default_factory=FerryIn)
    payment: PaymentIn = Field(default_factory=PaymentIn)
    declaration: bool = False

    def to_snapshot(self) -> TripSnapshot:
        trip = self.trip.model_dump()
        trip["personal_travel_dates"] = frozenset(self.trip.personal_travel_dates)
        accommodation = self.accommodation.model_dump()
        accommodation["type"] = AccommodationType.parse(self.accommodation.type)
        return TripSnapshot(
            booking_for=self.booking_for,
            travelers=tuple(Traveler(**traveler.model_dump()) for traveler in self.travelers),
            trip=TripWindow(**trip),
            trip_purpose=self.trip_purpose,
            trip_purpose_other=self.trip_purpose_other,
            work_location=self.work_location,
            work_order=self.work_order,
            cost_centre=self.cost_centre,
            cumulative_days=self.cumulative_days,
            is_aboriginal_land=self.is_aboriginal_land,
            accommodation=AccommodationSpec(**accommodation),
            meals=MealsSpec(provided_meals=frozenset(self.provided_meals)),
            vehicle=VehicleSpec(**self.vehicle.model_dump()),
            transport_options=frozenset(self.transport_options),
            flights=FlightDetails(**self.flights.model_dump()),
            car_hire=CarHire(**self.car_hire.model_dump()),
            ferry=FerryDetails(**self.ferry.model_dump()),
            payment=PaymentSpec(**self.payment.model_dump()),
            declaration=self.declaration,
        )


@lru_cache(maxsize=1)
def get_rate_table() -> RateTable:
    if settings.rules_path is not None:
        return load_rate_table(settings.rules_path)
    return default_rate_table()


@app.post("/allowances/recalculate")
def recalculate_allowances(payload: TripSnapshotIn, rates: RateTable = Depends(get_rate_table)):
    snapshot = AllowanceEngine(rates).recalculate(payload.to_snapshot())
    allowances = snapshot.allowances
    logger.info(
        "Recalculated allowances: travel_type=%s total=%s",
        allowances.travel_type.value,
        allowances.total,
    )
    return {
        "business_nights": snapshot.business_nights,
        "travel_type": snapshot.travel_type.value,
        "accommodation_nights": snapshot.accommodation.nights,
        "accommodation_rate": str(snapshot.accommodation_rate),
        "meals_eligible": snapshot.meals.eligible,
        "breakfast_eligible": snapshot.meals.breakfast_eligible,
        "allowances": allowances.to_dict(),
    }


@app.post("/allowances/validate")
def validate_allowances(
    payload: TripSnapshotIn,
    section: Optional[int] = None,
    rates: RateTable = Depends(get_rate_table),
):
    wizard_section = None
    if section is not None:
        try:
            wizard_section = WizardSection(section)
        except ValueError:
            raise HTTPException(status_code=404, detail="Wizard section not found") from None

    snapshot = AllowanceEngine(rates).recalculate(payload.to_snapshot())
    result = validate_snapshot(snapshot, wizard_section)
    return {"valid": result.valid, "errors": result.errors}


@app.get("/rates")
def rates_table(rates: RateTable = Depends(get_rate_table)):
    return rates.to_dict()


@app.get("/health")
def health():
    return {"status": "ok"}
