from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

TitleStr = Annotated[str, Field(strip_whitespace=True, min_length=1, max_length=255)]

class WorkoutCreate(BaseModel):
    title: TitleStr
    description: str | None = None

class WorkoutRead(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}

class ExerciseCreate(BaseModel):
    name: TitleStr
    slug: str | None = None
    description: str | None = None

    @field_validator("slug")
    @classmethod
    def slug_clean(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v2 = v.strip().lower()
        if not v2:
            raise ValueError("slug cannot be blank")
        return v2

class ExerciseRead(BaseModel):
    id: int
    slug: str
    name: str
    description: str | None = None

    model_config = {"from_attributes": True}
