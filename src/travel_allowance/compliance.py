from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from .models import ZERO, AccommodationType, SAPCode, TravelType
from .rates import RateTable, default_rate_table

BASE_CODES = {
    TravelType.SHORT_STAY: SAPCode.TRAVEL_ALLOWANCE,
    TravelType.LONG_STAY: SAPCode.LAFHA,
    TravelType.REPORTABLE_LAFHA: SAPCode.REPORTABLE_LAFHA,
}

ABORIGINAL_LAND_CODES = (SAPCode.ABORIGINAL_LAND, SAPCode.ABORIGINAL_LAND_BONUS)


def sap_codes(
    travel_type: TravelType,
    *,
    is_aboriginal_land: bool = False,
    meals_amount: Decimal = ZERO,
    breakfast_eligible: bool = False,
    is_remote: bool = False,
    vehicle_amount: Decimal = ZERO,
) -> Tuple[SAPCode, ...]:
    """Payroll codes in emission order, without duplicates.

    Aboriginal Land trips are paid on OR12/OR13 alone, whatever the other
    amounts are.
    """
    if is_aboriginal_land or travel_type is TravelType.ABORIGINAL_LAND:
        return ABORIGINAL_LAND_CODES

    codes: List[SAPCode] = [BASE_CODES[travel_type]]
    if meals_amount > 0:
        codes.append(SAPCode.MEALS)
        if breakfast_eligible:
            codes.append(SAPCode.BREAKFAST)
        if is_remote:
            codes.append(SAPCode.REMOTE_MEALS)
    if vehicle_amount > 0:
        codes.append(SAPCode.VEHICLE)

    return tuple(dict.fromkeys(codes))


def fbt_applicable(travel_type: TravelType, is_aboriginal_land: bool) -> bool:
    return travel_type is not TravelType.SHORT_STAY and not is_aboriginal_land


def receipt_required(
    accommodation_type: AccommodationType,
    total: Decimal,
    rates: Optional[RateTable] = None,
) -> bool:
    """Self-booked stays always need receipts; otherwise only high-value claims."""
    if AccommodationType.parse(accommodation_type) is AccommodationType.SELF_BOOKED:
        return True
    rates = rates or default_rate_table()
    return total > rates.receipt_threshold


__all__ = ["ABORIGINAL_LAND_CODES", "BASE_CODES", "fbt_applicable", "receipt_required", "sap_codes"]
