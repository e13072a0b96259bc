import uuid
from dataclasses import dataclass, field
from enum import Enum
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, String, Text, Numeric, DateTime, Uuid, func
from fitflow.db import Base
from fitflow.weights import weight_property

class PrescriptionType(str, Enum):
    straight = "straight"
    superset = "superset"
    circuit = "circuit"
    giant_set = "giant_set"
    drop_set = "drop_set"
    pyramid = "pyramid"
    rest_pause = "rest_pause"
    amrap = "amrap"
    emom = "emom"
    hiit = "hiit"
    warmup = "warmup"
    cooldown = "cooldown"

PRESCRIPTION_TYPES = frozenset(t.value for t in PrescriptionType)

# Group-level columns repeated on every row of a group
GROUP_FIELDS = ("type", "group_order", "group_rounds", "rest_between_sets", "group_name", "group_notes")

class WorkoutPrescription(Base):
    """
    One exercise inside one group of a workout. A group is the set of rows
    sharing ``group_id``; its type/order/rounds/rest/name/notes are stored on
    every row, so a straight set and a six-exercise giant set have the same
    shape and differ only in ``type`` and row count.
    """
    __tablename__ = "workout_prescriptions"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_id: Mapped[int] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    rpe_value_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # group level
    group_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default=PrescriptionType.straight.value)
    group_order: Mapped[int] = mapped_column(Integer, nullable=False)
    group_rounds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rest_between_sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    group_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    group_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # exercise level
    exercise_order: Mapped[int] = mapped_column(Integer, nullable=False)
    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hold_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_weight_kg: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    original_target_weight_value: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    original_target_weight_unit: Mapped[str | None] = mapped_column(String(2), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    target_weight = weight_property("target_weight")

    workout = relationship("Workout", back_populates="prescriptions")
    exercise = relationship("Exercise")

    def __repr__(self):
        return "<WorkoutPrescription(id=%s, group=%s, type=%s, order=%s.%s)>" % (
            self.id, self.group_id, self.type, self.group_order, self.exercise_order,
        )


@dataclass(slots=True)
class PrescriptionGroup:
    """Read-side view of the rows sharing one ``group_id``."""
    group_id: uuid.UUID
    workout_id: int
    type: str
    group_order: int
    group_rounds: int | None
    rest_between_sets: int | None
    group_name: str | None
    group_notes: str | None
    exercises: list[WorkoutPrescription] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: WorkoutPrescription) -> "PrescriptionGroup":
        return cls(
            group_id=row.group_id,
            workout_id=row.workout_id,
            type=row.type,
            group_order=row.group_order,
            group_rounds=row.group_rounds,
            rest_between_sets=row.rest_between_sets,
            group_name=row.group_name,
            group_notes=row.group_notes,
        )


def group_prescriptions(rows: list[WorkoutPrescription]) -> list[PrescriptionGroup]:
    """Fold rows into groups, keeping the order in which groups first appear."""
    groups: dict[uuid.UUID, PrescriptionGroup] = {}
    for row in rows:
        if row.group_id not in groups:
            groups[row.group_id] = PrescriptionGroup.from_row(row)
        groups[row.group_id].exercises.append(row)
    return list(groups.values())
