"""EA rate tables.

Rates, uplift factors and eligibility thresholds are kept in a YAML document
next to this module (``rules/ea_2024.yaml``) so a new agreement only needs a
new rules file. Every amount is loaded as a ``Decimal``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time
from decimal import Decimal, ROUND_HALF_UP
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .models import AccommodationType, MealType, TravelType

logger = logging.getLogger(__name__)

RULES_DIR = Path(__file__).resolve().parent / "rules"
DEFAULT_RULES_PATH = RULES_DIR / "ea_2024.yaml"

RULE_VERSION = "EA_2024_TRAVEL_RULES"

CENT = Decimal("0.01")

# Table rows keyed by accommodation type. Self-booked splits on approval.
_RATE_ROWS = ("ctm", "private", "self_booked_approved", "self_booked")
_TABLE_TRAVEL_TYPES = (
    TravelType.SHORT_STAY,
    TravelType.LONG_STAY,
    TravelType.REPORTABLE_LAFHA,
)


class RateTableError(ValueError):
    """Raised when a rules file cannot be turned into a rate table."""


@dataclass(frozen=True)
class Uplift:
    name: str
    factor: Decimal
    clause: str


@dataclass(frozen=True)
class RateTable:
    rule_version: str
    accommodation: Dict[str, Dict[TravelType, Decimal]]
    aboriginal_land_daily_rate: Decimal
    remote: Uplift
    substandard: Uplift
    short_notice: Uplift
    meals_daily_rate: Decimal
    meal_deductions: Dict[MealType, Decimal]
    minimum_trip_hours: Decimal
    local_location_keywords: Tuple[str, ...]
    usual_start_time: time
    breakfast_lead_hours: int
    vehicle_rate_per_km: Decimal
    vehicle_clause: str
    long_stay_nights: int
    long_stay_cumulative_days: int
    reportable_lafha_nights: int
    receipt_threshold: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RateTable":
        try:
            accommodation = {
                row: {
                    travel_type: _decimal(data["accommodation"][row][travel_type.value])
                    for travel_type in _TABLE_TRAVEL_TYPES
                }
                for row in _RATE_ROWS
            }
            uplifts = data["uplifts"]
            meals = data["meals"]
            vehicle = data["vehicle"]
            classification = data["classification"]
            hours, minutes = str(meals["usual_start_time"]).split(":")
            return cls(
                rule_version=str(data.get("rule_version", RULE_VERSION)),
                accommodation=accommodation,
                aboriginal_land_daily_rate=_decimal(data["aboriginal_land"]["daily_rate"]),
                remote=_uplift("remote", uplifts["remote"]),
                substandard=_uplift("substandard", uplifts["substandard"]),
                short_notice=_uplift("short_notice", uplifts["short_notice"]),
                meals_daily_rate=_decimal(meals["daily_rate"]),
                meal_deductions={
                    meal: _decimal(meals["deductions"][meal.value]) for meal in MealType
                },
                minimum_trip_hours=_decimal(meals["minimum_trip_hours"]),
                local_location_keywords=tuple(
                    str(keyword).lower() for keyword in meals["local_location_keywords"]
                ),
                usual_start_time=time(int(hours), int(minutes)),
                breakfast_lead_hours=int(meals["breakfast_lead_hours"]),
                vehicle_rate_per_km=_decimal(vehicle["rate_per_km"]),
                vehicle_clause=str(vehicle["clause"]),
                long_stay_nights=int(classification["long_stay_nights"]),
                long_stay_cumulative_days=int(classification["long_stay_cumulative_days"]),
                reportable_lafha_nights=int(classification["reportable_lafha_nights"]),
                receipt_threshold=_decimal(data["compliance"]["receipt_threshold"]),
            )
        except KeyError as exc:
            raise RateTableError(f"Missing key in rate table: {exc}") from exc
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise RateTableError(f"Invalid value in rate table: {exc}") from exc

    def accommodation_row(
        self, accommodation_type: AccommodationType, approved: bool
    ) -> Optional[Dict[TravelType, Decimal]]:
        if accommodation_type is AccommodationType.SELF_BOOKED:
            return self.accommodation["self_booked_approved" if approved else "self_booked"]
        if accommodation_type is AccommodationType.CTM:
            return self.accommodation["ctm"]
        if accommodation_type is AccommodationType.PRIVATE:
            return self.accommodation["private"]
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_version": self.rule_version,
            "accommodation": {
                row: {travel_type.value: str(rate) for travel_type, rate in rates.items()}
                for row, rates in self.accommodation.items()
            },
            "aboriginal_land_daily_rate": str(self.aboriginal_land_daily_rate),
            "uplifts": {
                uplift.name: {"factor": str(uplift.factor), "clause": uplift.clause}
                for uplift in (self.remote, self.substandard, self.short_notice)
            },
            "meals": {
                "daily_rate": str(self.meals_daily_rate),
                "deductions": {meal.value: str(amount) for meal, amount in self.meal_deductions.items()},
            },
            "vehicle": {"rate_per_km": str(self.vehicle_rate_per_km), "clause": self.vehicle_clause},
            "receipt_threshold": str(self.receipt_threshold),
        }


def load_rate_table(path: Path | str | None = None) -> RateTable:
    rules_path = Path(path) if path is not None else DEFAULT_RULES_PATH
    if not rules_path.exists():
        raise RateTableError(f"Rate table file not found: {rules_path}")

    with rules_path.open("r", encoding="utf-8") as rules_file:
        loaded = yaml.safe_load(rules_file)

    if not isinstance(loaded, dict):
        raise RateTableError(f"Rate table must contain a dictionary at root: {rules_path}")

    table = RateTable.from_dict(loaded)
    logger.info("Loaded rate table %s from %s", table.rule_version, rules_path)
    return table


@lru_cache(maxsize=1)
def default_rate_table() -> RateTable:
    return load_rate_table(DEFAULT_RULES_PATH)


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def _uplift(name: str, data: Dict[str, Any]) -> Uplift:
    return Uplift(name=name, factor=_decimal(data["factor"]), clause=str(data["clause"]))


__all__ = [
    "DEFAULT_RULES_PATH",
    "RULE_VERSION",
    "RateTable",
    "RateTableError",
    "Uplift",
    "default_rate_table",
    "load_rate_table",
    "money",
]
