from decimal import Decimal

import pytest

from fitflow.units import (
    from_kg,
    kg_to_lb,
    lb_to_kg,
    normalize_unit,
    preferred_unit,
    round2,
    to_kg,
)

def test_135_lb_is_61_23_kg():
    assert lb_to_kg(135) == Decimal("61.23")
    assert to_kg(135, "lb") == Decimal("61.23")

def test_kg_to_lb():
    assert kg_to_lb(100) == Decimal("220.46")
    assert from_kg(Decimal("61.23"), "lb") == Decimal("134.99")

def test_rounding_is_half_away_from_zero():
    assert round2("0.125") == Decimal("0.13")
    assert round2("-0.125") == Decimal("-0.13")
    assert round2("2.675") == Decimal("2.68")

def test_float_input_uses_its_decimal_text():
    assert to_kg(0.1, "kg") == Decimal("0.10")

@pytest.mark.parametrize("raw, expected", [
    ("lb", "lb"), ("LB", "lb"), ("lbs", "lb"), (" Lbs ", "lb"),
    ("kg", "kg"), ("KG", "kg"), ("", "kg"), (None, "kg"), ("stone", "kg"),
])
def test_normalize_unit(raw, expected):
    assert normalize_unit(raw) == expected

def test_unknown_unit_converts_as_kg():
    assert to_kg(100, "pounds") == Decimal("100.00")
    assert from_kg(100, "oz") == Decimal("100.00")

@pytest.mark.parametrize("kg", ["0.01", "0.5", "1", "2.5", "61.23", "100", "250.75", "999.99"])
def test_round_trip_through_lb_stays_within_tolerance(kg):
    kg = Decimal(kg)
    assert abs(to_kg(from_kg(kg, "lb"), "lb") - kg) < Decimal("0.02")

def test_preferred_unit_takes_first_non_empty():
    assert preferred_unit("lbs", "kg") == "lb"
    assert preferred_unit(None, "", "lb") == "lb"
    assert preferred_unit(None, "kg", "lb") == "kg"
    assert preferred_unit(None, None) == "kg"
    assert preferred_unit() == "kg"
