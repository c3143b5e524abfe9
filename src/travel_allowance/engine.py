from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from .calculator import (
    accommodation_total,
    breakfast_eligible,
    meals_allowance,
    meals_eligible,
    nightly_rate,
    vehicle_allowance,
)
from .classifier import business_nights, classify
from .compliance import fbt_applicable, receipt_required, sap_codes
from .models import (
    TRAVEL_TYPE_LABELS,
    ZERO,
    AccommodationSpec,
    AccommodationType,
    CalculatedAllowances,
    TravelType,
    TripSnapshot,
)
from .rates import RateTable, default_rate_table

logger = logging.getLogger(__name__)


class AllowanceEngine:
    """Recomputes every derived field of a trip snapshot from its raw inputs."""

    def __init__(self, rates: Optional[RateTable] = None):
        self.rates = rates or default_rate_table()

    @property
    def rule_version(self) -> str:
        return self.rates.rule_version

    def recalculate(self, snapshot: TripSnapshot) -> TripSnapshot:
        """
        Return a new snapshot with classification and allowances recalculated.

        Derived values already present on ``snapshot`` are ignored, so calling
        this twice yields the same result as calling it once.
        """
        rates = self.rates
        steps: List[str] = [f"Applying rule version: {rates.rule_version}"]

        nights = business_nights(snapshot.trip)
        personal_days = len(snapshot.trip.personal_travel_dates)
        steps.append(
            f"Business nights = {nights} ({personal_days} personal travel date(s) declared)."
        )

        cumulative_days = max(0, snapshot.cumulative_days) + nights
        travel_type = classify(nights, cumulative_days, snapshot.is_aboriginal_land, rates)
        if snapshot.is_aboriginal_land:
            steps.append("Aboriginal Land trip: classification overrides duration rules.")
        else:
            steps.append(
                f"{nights} night(s), {cumulative_days} cumulative day(s): "
                f"{TRAVEL_TYPE_LABELS[travel_type]}."
            )

        accommodation = snapshot.accommodation
        if accommodation.required:
            accommodation = replace(accommodation, nights=nights)

        rate = nightly_rate(travel_type, accommodation, rates)

        trip_meals_eligible = meals_eligible(snapshot.trip, snapshot.work_location, rates)
        trip_breakfast_eligible = breakfast_eligible(snapshot.trip.departure_time, rates)
        meals = replace(
            snapshot.meals,
            eligible=trip_meals_eligible,
            breakfast_eligible=trip_breakfast_eligible,
        )

        vehicle = vehicle_allowance(
            snapshot.vehicle.use_private_vehicle,
            snapshot.vehicle.estimated_km,
            snapshot.vehicle.departing_from_approved_location,
            rates,
        )

        accommodation_amount = accommodation_total(travel_type, accommodation, nights, rates)
        steps.extend(self._accommodation_steps(travel_type, accommodation, nights, rate))

        business_days = nights + 1
        meals_amount = meals_allowance(
            meals.eligible,
            business_days,
            meals.provided_meals,
            meals.breakfast_eligible,
            snapshot.is_aboriginal_land,
            rates,
        )
        if snapshot.is_aboriginal_land:
            steps.append("Meals: included in the Aboriginal Land daily rate.")
        elif not meals.eligible:
            steps.append(
                f"Meals: trip not eligible ({rates.minimum_trip_hours} hours or less, or local work location)."
            )
        else:
            steps.append(
                f"Meals: {business_days} day(s) x {rates.meals_daily_rate} less provided meals "
                f"= {meals_amount}."
            )

        if vehicle > 0:
            steps.append(
                f"Private vehicle: {snapshot.vehicle.estimated_km} km x {rates.vehicle_rate_per_km} "
                f"(EA {rates.vehicle_clause}) = {vehicle}."
            )
        elif snapshot.vehicle.use_private_vehicle:
            steps.append(
                f"Private vehicle: not departing from an approved location (EA {rates.vehicle_clause}), no allowance."
            )

        codes = sap_codes(
            travel_type,
            is_aboriginal_land=snapshot.is_aboriginal_land,
            meals_amount=meals_amount,
            breakfast_eligible=meals.breakfast_eligible,
            is_remote=accommodation.is_remote,
            vehicle_amount=vehicle,
        )

        uplifts = ZERO
        total = accommodation_amount + meals_amount + vehicle + uplifts
        steps.append(
            f"Total = accommodation {accommodation_amount} + meals {meals_amount} "
            f"+ vehicle {vehicle} + uplifts {uplifts} = {total}."
        )

        allowances = CalculatedAllowances(
            travel_type=travel_type,
            sap_codes=codes,
            total_nights=nights,
            total_days=business_days,
            fbt_applicable=fbt_applicable(travel_type, snapshot.is_aboriginal_land),
            accommodation=accommodation_amount,
            meals=meals_amount,
            vehicle=vehicle,
            uplifts=uplifts,
            total=total,
            receipt_required=receipt_required(accommodation.type, total, rates),
            rule_version=rates.rule_version,
            calculation_steps=tuple(steps),
        )
        logger.debug(
            "Recalculated trip: travel_type=%s nights=%s total=%s codes=%s",
            travel_type.value,
            nights,
            total,
            ",".join(code.value for code in codes),
        )

        return replace(
            snapshot,
            business_nights=nights,
            travel_type=travel_type,
            accommodation=accommodation,
            accommodation_rate=rate,
            meals=meals,
            allowances=allowances,
        )

    def _accommodation_steps(
        self,
        travel_type: TravelType,
        accommodation: AccommodationSpec,
        nights: int,
        rate: Decimal,
    ) -> List[str]:
        rates = self.rates
        if travel_type is TravelType.ABORIGINAL_LAND:
            return [
                f"Accommodation: {nights + 1} day(s) x fixed Aboriginal Land rate "
                f"{rates.aboriginal_land_daily_rate}, no uplifts."
            ]
        if not accommodation.required:
            return ["Accommodation: not required."]
        if accommodation.nights <= 0:
            return ["Accommodation: no business nights, nothing payable."]

        accommodation_type = AccommodationType.parse(accommodation.type)
        steps = [f"Accommodation: {accommodation_type.value} rate for {travel_type.value}."]
        if accommodation.is_remote:
            steps.append(f"Remote uplift x{rates.remote.factor} (EA {rates.remote.clause}).")
        if accommodation.is_substandard:
            steps.append(
                f"Substandard uplift x{rates.substandard.factor} (EA {rates.substandard.clause})."
            )
        if accommodation.is_short_notice:
            scope = "first night only" if accommodation.short_notice_first_night_only else "all nights"
            steps.append(
                f"Short notice uplift x{rates.short_notice.factor} on {scope} "
                f"(EA {rates.short_notice.clause})."
            )
        steps.append(f"Nightly rate {rate} for {accommodation.nights} night(s).")
        return steps


def recalculate(snapshot: TripSnapshot, rates: Optional[RateTable] = None) -> TripSnapshot:
    return AllowanceEngine(rates).recalculate(snapshot)


__all__ = ["AllowanceEngine", "recalculate"]
