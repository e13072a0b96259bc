import uuid
from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field

from fitflow.schemas.prescription import ExerciseBrief
from fitflow.schemas.weight import WeightIn, WeightOut

# Notes: trimmed, up to 500 chars
NotesStr = Annotated[str, Field(strip_whitespace=True, max_length=500)]
Rating = Annotated[int, Field(ge=1, le=10)]
NonNegInt = Annotated[int, Field(ge=0)]

# --- requests ---

class SessionStart(BaseModel):
    # defaults to the caller; trainers and admins may log for someone else
    user_id: int | None = None
    workout_id: int | None = None
    started_at: datetime | None = None
    notes: NotesStr | None = None

class SessionEnd(BaseModel):
    ended_at: datetime | None = None
    perceived_intensity: Rating | None = None
    notes: NotesStr | None = None

class SessionUpdate(BaseModel):
    notes: NotesStr | None = None
    perceived_intensity: Rating | None = None
    duration_seconds: NonNegInt | None = None

class BlockCreate(BaseModel):
    session_id: int
    group_id: uuid.UUID | None = None

class BlockExertion(BaseModel):
    perceived_exertion: Rating | None

class SessionExerciseCreate(BaseModel):
    session_block_id: int
    exercise_id: int
    prescription_id: int | None = None
    notes: NotesStr | None = None

class ExerciseNotes(BaseModel):
    notes: NotesStr | None

class SetCreate(BaseModel):
    session_exercise_id: int
    actual_reps: NonNegInt | None = None
    actual_weight: WeightIn | None = None
    actual_duration_seconds: NonNegInt | None = None
    rpe_value_id: int | None = None
    notes: NotesStr | None = None

class SetUpdate(BaseModel):
    """Partial update; only fields present in the body change. A null
    actual_weight clears the logged weight."""
    actual_reps: NonNegInt | None = None
    actual_weight: WeightIn | None = None
    actual_duration_seconds: NonNegInt | None = None
    rpe_value_id: int | None = None
    was_failure: bool | None = None
    completed: bool | None = None
    notes: NotesStr | None = None

    def changes(self) -> dict:
        data = {name: getattr(self, name) for name in self.model_fields_set}
        # flags are not nullable; null means "leave as is"
        for flag in ("was_failure", "completed"):
            if flag in data and data[flag] is None:
                del data[flag]
        if "actual_weight" in data and data["actual_weight"] is not None:
            data["actual_weight"] = data["actual_weight"].to_field()
        return data

# --- responses ---

class SetRead(BaseModel):
    id: int
    session_exercise_id: int
    set_number: int
    completed: bool
    actual_reps: int | None = None
    actual_weight: WeightOut | None = None
    actual_duration_seconds: int | None = None
    rpe_value_id: int | None = None
    was_failure: bool
    notes: str | None = None

class PrescriptionBrief(BaseModel):
    id: int
    sets: int | None = None
    reps: int | None = None
    hold_seconds: int | None = None
    target_weight: WeightOut | None = None
    rpe_value_id: int | None = None
    notes: str | None = None

class SessionExerciseRead(BaseModel):
    id: int
    session_block_id: int
    exercise_id: int
    exercise: ExerciseBrief | None = None
    exercise_order: int
    prescription: PrescriptionBrief | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    skipped: bool
    notes: str | None = None
    sets: list[SetRead] = []

class BlockRead(BaseModel):
    id: int
    session_id: int
    group_id: uuid.UUID | None = None
    block_order: int
    # copied from the group's prescriptions; null for free-form blocks
    type: str | None = None
    group_name: str | None = None
    group_rounds: int | None = None
    rest_between_sets: int | None = None
    group_notes: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    skipped: bool
    perceived_exertion: int | None = None
    exercises: list[SessionExerciseRead] = []

class SessionDetail(BaseModel):
    id: int
    user_id: int
    created_by_id: int | None = None
    created_by_name: str | None = None
    workout_id: int | None = None
    workout_title: str | None = None
    started_at: datetime
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    duration_minutes: int | None = None
    perceived_intensity: int | None = None
    completed: bool
    notes: str | None = None
    weight_unit: str
    blocks: list[BlockRead] = []

class SessionListItem(BaseModel):
    id: int
    user_id: int
    workout_id: int | None = None
    workout_title: str | None = None
    started_at: datetime
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    completed: bool
    total_blocks: int
    completed_blocks: int

class SessionPage(BaseModel):
    items: list[SessionListItem]
    total: int
    limit: int
    offset: int
