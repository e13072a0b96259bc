"""
Weight unit conversion.

All results are rounded to two decimal places, half away from zero
(135 lb -> 61.23 kg, 0.125 kg -> 0.13 kg). Unknown or empty units are
treated as kilograms.
"""
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, float, str]

KG = "kg"
LB = "lb"

# 1 lb is defined as exactly 0.45359237 kg; the reverse factor is its reciprocal
LB_TO_KG = Decimal("0.45359237")
KG_TO_LB = Decimal("2.20462262185")

_TWO_PLACES = Decimal("0.01")
_LB_ALIASES = {"lb", "lbs"}


def as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of the binary float expansion
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    return as_decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def normalize_unit(unit: str | None) -> str:
    """Map any accepted spelling to "kg" or "lb"."""
    if unit and unit.strip().lower() in _LB_ALIASES:
        return LB
    return KG


def lb_to_kg(lb: Number) -> Decimal:
    return round2(as_decimal(lb) * LB_TO_KG)


def kg_to_lb(kg: Number) -> Decimal:
    return round2(as_decimal(kg) * KG_TO_LB)


def to_kg(value: Number, unit: str | None) -> Decimal:
    if normalize_unit(unit) == LB:
        return lb_to_kg(value)
    return round2(value)


def from_kg(kg: Number, unit: str | None) -> Decimal:
    if normalize_unit(unit) == LB:
        return kg_to_lb(kg)
    return round2(kg)


def preferred_unit(*candidates: str | None) -> str:
    """First non-empty candidate, normalized; kg when all are empty."""
    for unit in candidates:
        if unit and unit.strip():
            return normalize_unit(unit)
    return KG
