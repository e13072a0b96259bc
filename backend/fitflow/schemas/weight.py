from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, Field

from fitflow.weights import WeightField, WeightOutput

WeightValue = Annotated[Decimal, Field(ge=0, le=10000, max_digits=8, decimal_places=2)]

class WeightIn(BaseModel):
    value: WeightValue
    # kg, lb or lbs; anything else is read as kg
    unit: str | None = "kg"

    def to_field(self) -> WeightField:
        return WeightField.from_input(self.value, self.unit)

class WeightOut(BaseModel):
    value: float
    unit: str

    @classmethod
    def from_output(cls, out: WeightOutput | None) -> "WeightOut | None":
        if out is None:
            return None
        return cls(value=float(out.value), unit=out.unit)
