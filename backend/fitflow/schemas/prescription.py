import uuid
from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field

from fitflow.repositories.prescription_repo import ExerciseSpec
from fitflow.schemas.weight import WeightIn, WeightOut

PosInt = Annotated[int, Field(ge=1)]
NonNegInt = Annotated[int, Field(ge=0)]
NotesStr = Annotated[str, Field(strip_whitespace=True, max_length=500)]
NameStr = Annotated[str, Field(strip_whitespace=True, max_length=120)]

class ExerciseAdd(BaseModel):
    exercise_id: int
    sets: PosInt | None = None
    # exactly one of reps / hold_seconds, checked when the group is written
    reps: NonNegInt | None = None
    hold_seconds: NonNegInt | None = None
    target_weight: WeightIn | None = None
    rpe_value_id: int | None = None
    notes: NotesStr | None = None

    def to_spec(self) -> ExerciseSpec:
        return ExerciseSpec(
            exercise_id=self.exercise_id,
            sets=self.sets,
            reps=self.reps,
            hold_seconds=self.hold_seconds,
            target_weight=self.target_weight.to_field() if self.target_weight else None,
            rpe_value_id=self.rpe_value_id,
            notes=self.notes,
        )

class PrescriptionExerciseCreate(ExerciseAdd):
    # range checked by the repository so it surfaces as a domain error
    exercise_order: int = 1

    def to_spec(self) -> ExerciseSpec:
        spec = super().to_spec()
        spec.exercise_order = self.exercise_order
        return spec

class PrescriptionGroupCreate(BaseModel):
    type: str
    group_order: int
    group_rounds: PosInt | None = None
    rest_between_sets: NonNegInt | None = None
    group_name: NameStr | None = None
    group_notes: NotesStr | None = None
    exercises: list[PrescriptionExerciseCreate]

class PrescriptionGroupUpdate(BaseModel):
    type: str | None = None
    group_order: int | None = None
    group_rounds: PosInt | None = None
    rest_between_sets: NonNegInt | None = None
    group_name: NameStr | None = None
    group_notes: NotesStr | None = None
    # replaces every exercise in the group when present
    exercises: list[PrescriptionExerciseCreate] | None = None

class GroupReorder(BaseModel):
    group_ids: Annotated[list[uuid.UUID], Field(min_length=1)]

class ExerciseBrief(BaseModel):
    id: int
    slug: str
    name: str

    model_config = {"from_attributes": True}

class PrescriptionExerciseRead(BaseModel):
    id: int
    exercise_id: int
    exercise: ExerciseBrief | None = None
    exercise_order: int
    sets: int | None = None
    reps: int | None = None
    hold_seconds: int | None = None
    target_weight: WeightOut | None = None
    rpe_value_id: int | None = None
    notes: str | None = None
    created_at: datetime | None = None

class PrescriptionGroupRead(BaseModel):
    group_id: uuid.UUID
    workout_id: int
    type: str
    group_order: int
    group_rounds: int | None = None
    rest_between_sets: int | None = None
    group_name: str | None = None
    group_notes: str | None = None
    exercises: list[PrescriptionExerciseRead]
