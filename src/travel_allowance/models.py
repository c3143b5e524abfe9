from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

ZERO = Decimal("0.00")


class TravelType(str, Enum):
    SHORT_STAY = "short_stay"
    LONG_STAY = "long_stay"
    REPORTABLE_LAFHA = "reportable_lafha"
    ABORIGINAL_LAND = "aboriginal_land"


TRAVEL_TYPE_LABELS = {
    TravelType.SHORT_STAY: "Travel Allowance (Short Stay)",
    TravelType.LONG_STAY: "LAFHA (Long Stay)",
    TravelType.REPORTABLE_LAFHA: "Reportable LAFHA",
    TravelType.ABORIGINAL_LAND: "Aboriginal Land Allowance",
}


class AccommodationType(str, Enum):
    CTM = "ctm"
    PRIVATE = "private"
    SELF_BOOKED = "self_booked"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> "AccommodationType":
        """Unknown or empty values resolve to NONE, which carries no rate."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NONE


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class SAPCode(str, Enum):
    TRAVEL_ALLOWANCE = "OR03"
    LAFHA = "OR23"
    REPORTABLE_LAFHA = "OR24"
    ABORIGINAL_LAND = "OR12"
    ABORIGINAL_LAND_BONUS = "OR13"
    VEHICLE = "0R04"
    MEALS = "0A53"
    BREAKFAST = "0A50"
    REMOTE_MEALS = "0A57"

    @property
    def description(self) -> str:
        return SAP_CODE_DESCRIPTIONS[self]


SAP_CODE_DESCRIPTIONS = {
    SAPCode.TRAVEL_ALLOWANCE: "Standard Travel Allowance",
    SAPCode.LAFHA: "LAFHA Standard",
    SAPCode.REPORTABLE_LAFHA: "Reportable LAFHA",
    SAPCode.ABORIGINAL_LAND: "Aboriginal Lands Allowance",
    SAPCode.ABORIGINAL_LAND_BONUS: "Aboriginal Lands Bonus",
    SAPCode.VEHICLE: "Vehicle Allowance",
    SAPCode.MEALS: "Standard Meals",
    SAPCode.BREAKFAST: "Breakfast Supplement",
    SAPCode.REMOTE_MEALS: "Remote Meal Supplement",
}


class TransportOption(str, Enum):
    FLIGHTS = "flights"
    CAR_HIRE = "car_hire"
    FERRY = "ferry"
    PRIVATE_VEHICLE = "private_vehicle"


class PaymentMethod(str, Enum):
    PAYROLL = "payroll"
    REIMBURSEMENT = "reimbursement"


class BookingFor(str, Enum):
    MYSELF = "myself"
    SOMEONE_ELSE = "someone_else"
    GROUP = "group"


class TripPurpose(str, Enum):
    WORK = "work"
    TRAINING = "training"
    CONFERENCE = "conference"
    OTHER = "other"


@dataclass(frozen=True)
class Traveler:
    name: str = ""
    employee_id: str = ""
    mobile_number: str = ""
    role: str = ""


@dataclass(frozen=True)
class TripWindow:
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    has_personal_travel: bool = False
    personal_travel_dates: frozenset[date] = frozenset()

    @property
    def departs_at(self) -> Optional[datetime]:
        if self.departure_date is None or self.departure_time is None:
            return None
        return datetime.combine(self.departure_date, self.departure_time)

    @property
    def returns_at(self) -> Optional[datetime]:
        if self.return_date is None or self.return_time is None:
            return None
        return datetime.combine(self.return_date, self.return_time)

    def contains(self, day: date) -> bool:
        if self.departure_date is None or self.return_date is None:
            return False
        return self.departure_date <= day <= self.return_date


@dataclass(frozen=True)
class AccommodationSpec:
    required: bool = False
    type: AccommodationType = AccommodationType.NONE
    approved: bool = False
    nights: int = 0
    is_remote: bool = False
    is_substandard: bool = False
    is_short_notice: bool = False
    short_notice_first_night_only: bool = False


@dataclass(frozen=True)
class MealsSpec:
    provided_meals: frozenset[MealType] = frozenset()
    # Both flags are derived from the trip window on every recalculation.
    eligible: bool = False
    breakfast_eligible: bool = False


@dataclass(frozen=True)
class VehicleSpec:
    use_private_vehicle: bool = False
    estimated_km: Decimal = ZERO
    departing_from_approved_location: bool = False
    start_location: str = ""
    end_location: str = ""


@dataclass(frozen=True)
class FlightDetails:
    from_location: str = ""
    to_location: str = ""
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    return_date: Optional[date] = None
    return_time: Optional[time] = None
    frequent_flyer_number: str = ""
    seat_preferences: str = ""
    notes: str = ""


@dataclass(frozen=True)
class CarHire:
    pickup_location: str = ""
    dropoff_location: str = ""
    pickup_date: Optional[date] = None
    pickup_time: Optional[time] = None
    dropoff_date: Optional[date] = None
    dropoff_time: Optional[time] = None
    vehicle_type: str = ""


@dataclass(frozen=True)
class FerryDetails:
    from_location: str = ""
    to_location: str = ""
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    vehicle_on_board: bool = False


@dataclass(frozen=True)
class PaymentSpec:
    payment_via: Optional[PaymentMethod] = None
    advance_payment_required: bool = False
    authorize_payroll_deduction: bool = False
    receipt_count: int = 0


@dataclass(frozen=True)
class CalculatedAllowances:
    travel_type: TravelType = TravelType.SHORT_STAY
    sap_codes: tuple[SAPCode, ...] = ()
    total_nights: int = 0
    total_days: int = 0
    fbt_applicable: bool = False
    accommodation: Decimal = ZERO
    meals: Decimal = ZERO
    vehicle: Decimal = ZERO
    uplifts: Decimal = ZERO
    total: Decimal = ZERO
    receipt_required: bool = False
    rule_version: str = ""
    calculation_steps: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "travel_type": self.travel_type.value,
            "sap_codes": [code.value for code in self.sap_codes],
            "total_nights": self.total_nights,
            "total_days": self.total_days,
            "fbt_applicable": self.fbt_applicable,
            "accommodation": str(self.accommodation),
            "meals": str(self.meals),
            "vehicle": str(self.vehicle),
            "uplifts": str(self.uplifts),
            "total": str(self.total),
            "receipt_required": self.receipt_required,
            "rule_version": self.rule_version,
            "calculation_steps": list(self.calculation_steps),
        }


@dataclass(frozen=True)
class TripSnapshot:
    """Raw wizard inputs plus the fields the engine derives from them.

    Only ``recalculate`` writes ``business_nights``, ``travel_type``,
    ``accommodation_rate`` and ``allowances``; callers treat them as read-only.
    """

    booking_for: Optional[BookingFor] = None
    travelers: tuple[Traveler, ...] = ()
    trip: TripWindow = field(default_factory=TripWindow)
    trip_purpose: Optional[TripPurpose] = None
    trip_purpose_other: str = ""
    work_location: str = ""
    work_order: str = ""
    cost_centre: str = ""
    cumulative_days: int = 0
    is_aboriginal_land: bool = False
    accommodation: AccommodationSpec = field(default_factory=AccommodationSpec)
    meals: MealsSpec = field(default_factory=MealsSpec)
    vehicle: VehicleSpec = field(default_factory=VehicleSpec)
    transport_options: frozenset[TransportOption] = frozenset()
    flights: FlightDetails = field(default_factory=FlightDetails)
    car_hire: CarHire = field(default_factory=CarHire)
    ferry: FerryDetails = field(default_factory=FerryDetails)
    payment: PaymentSpec = field(default_factory=PaymentSpec)
    declaration: bool = False

    business_nights: int = 0
    travel_type: TravelType = TravelType.SHORT_STAY
    accommodation_rate: Decimal = ZERO
    allowances: CalculatedAllowances = field(default_factory=CalculatedAllowances)

    @property
    def receipt_required(self) -> bool:
        return self.allowances.receipt_required
