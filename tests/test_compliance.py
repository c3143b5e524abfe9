from decimal import Decimal

import pytest

from travel_allowance.compliance import fbt_applicable, receipt_required, sap_codes
from travel_allowance.models import AccommodationType, SAPCode, TravelType


@pytest.mark.parametrize(
    "travel_type, code",
    [
        (TravelType.SHORT_STAY, "OR03"),
        (TravelType.LONG_STAY, "OR23"),
        (TravelType.REPORTABLE_LAFHA, "OR24"),
    ],
)
def test_base_code_follows_travel_type(travel_type, code):
    assert [c.value for c in sap_codes(travel_type)] == [code]


def test_meal_and_vehicle_codes_in_emission_order():
    codes = sap_codes(
        TravelType.LONG_STAY,
        meals_amount=Decimal("150.00"),
        breakfast_eligible=True,
        is_remote=True,
        vehicle_amount=Decimal("96.00"),
    )

    assert [c.value for c in codes] == ["OR23", "0A53", "0A50", "0A57", "0R04"]


def test_meal_supplements_need_a_meals_amount():
    codes = sap_codes(
        TravelType.SHORT_STAY,
        meals_amount=Decimal("0.00"),
        breakfast_eligible=True,
        is_remote=True,
    )

    assert codes == (SAPCode.TRAVEL_ALLOWANCE,)


def test_aboriginal_land_codes_are_exclusive():
    codes = sap_codes(
        TravelType.ABORIGINAL_LAND,
        is_aboriginal_land=True,
        meals_amount=Decimal("75.00"),
        breakfast_eligible=True,
        is_remote=True,
        vehicle_amount=Decimal("96.00"),
    )

    assert [c.value for c in codes] == ["OR12", "OR13"]


def test_codes_are_unique():
    codes = sap_codes(
        TravelType.SHORT_STAY,
        meals_amount=Decimal("1.00"),
        breakfast_eligible=True,
        is_remote=True,
        vehicle_amount=Decimal("1.00"),
    )
    assert len(codes) == len(set(codes))


@pytest.mark.parametrize(
    "travel_type, is_aboriginal_land, expected",
    [
        (TravelType.SHORT_STAY, False, False),
        (TravelType.LONG_STAY, False, True),
        (TravelType.REPORTABLE_LAFHA, False, True),
        (TravelType.ABORIGINAL_LAND, True, False),
    ],
)
def test_fbt_applicability(travel_type, is_aboriginal_land, expected):
    assert fbt_applicable(travel_type, is_aboriginal_land) is expected


def test_self_booked_always_needs_receipts():
    assert receipt_required(AccommodationType.SELF_BOOKED, Decimal("0.00"))


def test_receipts_above_threshold():
    assert not receipt_required(AccommodationType.CTM, Decimal("300.00"))
    assert receipt_required(AccommodationType.CTM, Decimal("300.01"))
    assert receipt_required("private", Decimal("450.00"))
