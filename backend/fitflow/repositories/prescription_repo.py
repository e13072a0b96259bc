from __future__ import annotations
import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Any, Iterable, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.orm import selectinload

from fitflow.errors import (
    AmbiguousPrescription,
    ContinuityError,
    EmptyGroup,
    ExerciseNotFound,
    InvalidOrder,
    InvalidType,
    PrescriptionNotFound,
    UnknownGroup,
    WorkoutNotFound,
)
from fitflow.models import (
    GROUP_FIELDS,
    PRESCRIPTION_TYPES,
    Exercise,
    PrescriptionGroup,
    Workout,
    WorkoutPrescription,
    group_prescriptions,
)
from fitflow.repositories.base import BaseRepository
from fitflow.weights import WeightField

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ExerciseSpec:
    exercise_id: int
    exercise_order: int = 1
    sets: int | None = None
    reps: int | None = None
    hold_seconds: int | None = None
    target_weight: WeightField | None = None
    rpe_value_id: int | None = None
    notes: str | None = None


# --- validation: runs before anything is written ---

def validate_type(type_: str) -> None:
    if type_ not in PRESCRIPTION_TYPES:
        raise InvalidType(f"invalid prescription type: {type_!r}")


def validate_group_order(group_order: int) -> None:
    if group_order is None or group_order < 1:
        raise InvalidOrder("group_order must be at least 1")


def validate_exercise(spec: ExerciseSpec, *, check_order: bool = True) -> None:
    has_reps = spec.reps is not None and spec.reps > 0
    has_hold = spec.hold_seconds is not None and spec.hold_seconds > 0
    if has_reps and has_hold:
        raise AmbiguousPrescription("prescription cannot have both reps and hold_seconds")
    if not has_reps and not has_hold:
        raise AmbiguousPrescription("prescription must have either reps or hold_seconds")
    if check_order and spec.exercise_order < 1:
        raise InvalidOrder("exercise_order must be at least 1")


def check_contiguous(orders: Sequence[int]) -> bool:
    return sorted(orders) == list(range(1, len(orders) + 1))


class PrescriptionRepository(BaseRepository[WorkoutPrescription]):
    model = WorkoutPrescription
    not_found = PrescriptionNotFound

    # READS
    def _workout(self, workout_id: int) -> Workout:
        workout = self.db.get(Workout, workout_id)
        if workout is None:
            raise WorkoutNotFound()
        return workout

    def _require_exercises(self, exercise_ids: Iterable[int]) -> None:
        wanted = set(exercise_ids)
        found = set(self.db.execute(select(Exercise.id).where(Exercise.id.in_(wanted))).scalars())
        missing = wanted - found
        if missing:
            raise ExerciseNotFound(f"Exercise not found: {sorted(missing)}")

    def rows_for_workout(self, workout_id: int) -> list[WorkoutPrescription]:
        stmt = (
            select(WorkoutPrescription)
            .where(WorkoutPrescription.workout_id == workout_id)
            .options(selectinload(WorkoutPrescription.exercise))
            .order_by(WorkoutPrescription.group_order.asc(), WorkoutPrescription.exercise_order.asc(),
                      WorkoutPrescription.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def group_rows(self, group_id: uuid.UUID, *, workout_id: int | None = None) -> list[WorkoutPrescription]:
        stmt = select(WorkoutPrescription).where(WorkoutPrescription.group_id == group_id)
        if workout_id is not None:
            stmt = stmt.where(WorkoutPrescription.workout_id == workout_id)
        stmt = stmt.order_by(WorkoutPrescription.exercise_order.asc(), WorkoutPrescription.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def list_groups(self, workout_id: int) -> list[PrescriptionGroup]:
        self._workout(workout_id)
        return group_prescriptions(self.rows_for_workout(workout_id))

    def get_group(self, group_id: uuid.UUID, *, workout_id: int | None = None) -> PrescriptionGroup:
        rows = self.group_rows(group_id, workout_id=workout_id)
        if not rows:
            raise UnknownGroup()
        return group_prescriptions(rows)[0]

    # WRITES
    def create_group(
        self,
        workout_id: int,
        *,
        type: str,
        group_order: int,
        exercises: Sequence[ExerciseSpec],
        group_rounds: int | None = None,
        rest_between_sets: int | None = None,
        group_name: str | None = None,
        group_notes: str | None = None,
        group_id: uuid.UUID | None = None,
    ) -> PrescriptionGroup:
        validate_type(type)
        validate_group_order(group_order)
        if not exercises:
            raise EmptyGroup()
        for spec in exercises:
            validate_exercise(spec)
        self._workout(workout_id)
        self._require_exercises(s.exercise_id for s in exercises)

        group_id = group_id or uuid.uuid4()
        header = dict(
            type=type,
            group_order=group_order,
            group_rounds=group_rounds,
            rest_between_sets=rest_between_sets,
            group_name=group_name,
            group_notes=group_notes,
        )
        rows = [self._new_row(workout_id, group_id, header, spec) for spec in exercises]
        self.db.add_all(rows)
        self.db.commit()
        log.info("created %s group %s (order %s, %d exercises) in workout %s",
                 type, group_id, group_order, len(rows), workout_id)
        return self.get_group(group_id)

    def _new_row(self, workout_id: int, group_id: uuid.UUID, header: dict[str, Any],
                 spec: ExerciseSpec) -> WorkoutPrescription:
        row = WorkoutPrescription(
            workout_id=workout_id,
            group_id=group_id,
            exercise_id=spec.exercise_id,
            exercise_order=spec.exercise_order,
            sets=spec.sets,
            reps=spec.reps,
            hold_seconds=spec.hold_seconds,
            rpe_value_id=spec.rpe_value_id,
            notes=spec.notes,
            **header,
        )
        row.target_weight = spec.target_weight
        return row

    def add_exercise_to_group(
        self, group_id: uuid.UUID, spec: ExerciseSpec, *, workout_id: int | None = None
    ) -> WorkoutPrescription:
        validate_exercise(spec, check_order=False)
        rows = self.group_rows(group_id, workout_id=workout_id)
        if not rows:
            raise UnknownGroup()
        self._require_exercises([spec.exercise_id])

        first = rows[0]
        spec = replace(spec, exercise_order=max(r.exercise_order for r in rows) + 1)
        header = {name: getattr(first, name) for name in GROUP_FIELDS}
        row = self._new_row(first.workout_id, group_id, header, spec)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        log.info("appended exercise %s to group %s at position %s", spec.exercise_id, group_id, row.exercise_order)
        return row

    def update_group(
        self,
        workout_id: int,
        group_id: uuid.UUID,
        *,
        changes: dict[str, Any],
        exercises: Sequence[ExerciseSpec] | None = None,
    ) -> PrescriptionGroup:
        """
        Apply group-level ``changes`` to every row of the group. When
        ``exercises`` is given the group's rows are replaced by it, keeping
        the group id.
        """
        changes = {k: v for k, v in changes.items() if k in GROUP_FIELDS}
        if "type" in changes:
            validate_type(changes["type"])
        if "group_order" in changes:
            validate_group_order(changes["group_order"])
        if exercises is not None:
            if not exercises:
                raise EmptyGroup()
            for spec in exercises:
                validate_exercise(spec)

        rows = self.group_rows(group_id, workout_id=workout_id)
        if not rows:
            raise UnknownGroup()

        if exercises is not None:
            self._require_exercises(s.exercise_id for s in exercises)
            header = {name: getattr(rows[0], name) for name in GROUP_FIELDS}
            header.update(changes)
            for row in rows:
                self.db.delete(row)
            self.db.flush()
            self.db.add_all([self._new_row(workout_id, group_id, header, s) for s in exercises])
        elif changes:
            self.db.execute(
                update(WorkoutPrescription)
                .where(WorkoutPrescription.workout_id == workout_id, WorkoutPrescription.group_id == group_id)
                .values(**changes)
                .execution_options(synchronize_session="fetch")
            )
        self.db.commit()
        return self.get_group(group_id)

    def delete_group(self, workout_id: int, group_id: uuid.UUID) -> None:
        result = self.db.execute(
            delete(WorkoutPrescription)
            .where(WorkoutPrescription.workout_id == workout_id, WorkoutPrescription.group_id == group_id)
            .execution_options(synchronize_session="fetch")
        )
        if not result.rowcount:
            raise UnknownGroup()
        self.db.commit()
        log.info("deleted group %s from workout %s (%d rows)", group_id, workout_id, result.rowcount)

    def remove_exercise(self, prescription_id: int, *, workout_id: int | None = None) -> None:
        row = self.get_or_raise(prescription_id)
        if workout_id is not None and row.workout_id != workout_id:
            raise PrescriptionNotFound()
        group_id = row.group_id
        self.db.delete(row)
        self.db.flush()
        # keep the group's exercise_order contiguous
        for position, sibling in enumerate(self.group_rows(group_id), start=1):
            sibling.exercise_order = position
        self.db.commit()

    def reorder_groups(self, workout_id: int, ordered_group_ids: Sequence[uuid.UUID]) -> None:
        self._workout(workout_id)
        known = set(self.db.execute(
            select(WorkoutPrescription.group_id).where(WorkoutPrescription.workout_id == workout_id).distinct()
        ).scalars())
        unknown = [str(g) for g in ordered_group_ids if g not in known]
        if unknown:
            raise UnknownGroup(f"Prescription group not found in this workout: {', '.join(unknown)}")
        if len(set(ordered_group_ids)) != len(ordered_group_ids):
            raise InvalidOrder("a group can only appear once in a reorder")

        for position, group_id in enumerate(ordered_group_ids, start=1):
            self.db.execute(
                update(WorkoutPrescription)
                .where(WorkoutPrescription.workout_id == workout_id, WorkoutPrescription.group_id == group_id)
                .values(group_order=position)
                .execution_options(synchronize_session="fetch")
            )
        self.db.commit()
        log.info("reordered %d groups in workout %s", len(ordered_group_ids), workout_id)

    def validate_order_continuity(self, workout_id: int) -> None:
        """
        Raise ContinuityError unless group orders are exactly 1..N across the
        workout and exercise orders are exactly 1..n inside every group.
        Read-only; nothing enforces this on ordinary writes.
        """
        rows = self.db.execute(
            select(WorkoutPrescription.group_id, WorkoutPrescription.group_order, WorkoutPrescription.exercise_order)
            .where(WorkoutPrescription.workout_id == workout_id)
        ).all()

        group_orders: dict[uuid.UUID, set[int]] = defaultdict(set)
        exercise_orders: dict[uuid.UUID, list[int]] = defaultdict(list)
        for group_id, group_order, exercise_order in rows:
            group_orders[group_id].add(group_order)
            exercise_orders[group_id].append(exercise_order)

        problems: list[str] = []
        for group_id, orders in group_orders.items():
            if len(orders) > 1:
                problems.append(f"group {group_id} has conflicting group_order values {sorted(orders)}")

        per_group = sorted(min(orders) for orders in group_orders.values())
        if not check_contiguous(per_group):
            problems.append(f"group_order values {per_group} must be continuous starting from 1")

        for group_id, orders in exercise_orders.items():
            if not check_contiguous(orders):
                problems.append(
                    f"exercise_order values {sorted(orders)} in group {group_id} must be continuous starting from 1"
                )

        if problems:
            log.warning("workout %s failed order continuity: %s", workout_id, problems)
            raise ContinuityError(problems)
