"""
Dual representation of a weight: the canonical kilogram value used for every
computation plus the exact value/unit pair the caller typed.

Rows store the three parts in plain columns; models expose them through a
``WeightField`` property so nothing outside this module touches the columns.
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from fitflow.errors import InvalidWeight
from fitflow.units import Number, as_decimal, from_kg, normalize_unit, to_kg


@dataclass(frozen=True, slots=True)
class WeightField:
    canonical_kg: Decimal
    original_value: Optional[Decimal] = None
    original_unit: Optional[str] = None

    @classmethod
    def from_input(cls, value: Number, unit: str | None) -> "WeightField":
        original = as_decimal(value)
        if original < 0:
            raise InvalidWeight()
        return cls(
            canonical_kg=to_kg(original, unit),
            original_value=original,
            original_unit=normalize_unit(unit),
        )

    @classmethod
    def from_columns(
        cls, kg: Decimal | None, value: Decimal | None, unit: str | None
    ) -> Optional["WeightField"]:
        if kg is None:
            return None
        if value is None or unit is None:
            value, unit = None, None
        return cls(canonical_kg=as_decimal(kg), original_value=value, original_unit=unit)

    def columns(self) -> tuple[Decimal, Decimal | None, str | None]:
        return self.canonical_kg, self.original_value, self.original_unit


@dataclass(frozen=True, slots=True)
class WeightOutput:
    value: Decimal
    unit: str


def project(field: WeightField | None, target_unit: str | None) -> WeightOutput | None:
    """Express a stored weight in the caller's unit; absent stays absent."""
    if field is None:
        return None
    unit = normalize_unit(target_unit)
    return WeightOutput(value=from_kg(field.canonical_kg, unit), unit=unit)


def weight_property(prefix: str):
    """
    Build a read/write ``WeightField`` property over the columns
    ``<prefix>_kg``, ``original_<prefix>_value`` and ``original_<prefix>_unit``.
    Assigning ``None`` clears all three.
    """
    kg_attr = f"{prefix}_kg"
    value_attr = f"original_{prefix}_value"
    unit_attr = f"original_{prefix}_unit"

    def getter(self) -> WeightField | None:
        return WeightField.from_columns(
            getattr(self, kg_attr), getattr(self, value_attr), getattr(self, unit_attr)
        )

    def setter(self, field: WeightField | None) -> None:
        kg, value, unit = field.columns() if field is not None else (None, None, None)
        setattr(self, kg_attr, kg)
        setattr(self, value_attr, value)
        setattr(self, unit_attr, unit)

    return property(getter, setter)
