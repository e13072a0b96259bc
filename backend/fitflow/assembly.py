"""
Turn loaded ORM rows into nested response models with every weight
expressed in the reader's unit.

Callers load the tree first (SessionRepository.get_tree and friends);
nothing here touches the database.
"""
from __future__ import annotations
from typing import Iterable

from fitflow.models import (
    PrescriptionGroup,
    SessionBlock,
    SessionExercise,
    SessionSet,
    WorkoutPrescription,
    WorkoutSession,
)
from fitflow.models.common import ensure_utc
from fitflow.schemas.prescription import (
    ExerciseBrief,
    PrescriptionExerciseRead,
    PrescriptionGroupRead,
)
from fitflow.schemas.session import (
    BlockRead,
    PrescriptionBrief,
    SessionDetail,
    SessionExerciseRead,
    SessionListItem,
    SetRead,
)
from fitflow.schemas.weight import WeightOut
from fitflow.units import normalize_unit
from fitflow.weights import project


def _weight(field, unit: str) -> WeightOut | None:
    return WeightOut.from_output(project(field, unit))


def _exercise_brief(owner) -> ExerciseBrief | None:
    exercise = owner.exercise
    return ExerciseBrief.model_validate(exercise) if exercise is not None else None


def build_set_response(s: SessionSet, unit: str) -> SetRead:
    return SetRead(
        id=s.id,
        session_exercise_id=s.session_exercise_id,
        set_number=s.set_number,
        completed=s.completed,
        actual_reps=s.actual_reps,
        actual_weight=_weight(s.actual_weight, unit),
        actual_duration_seconds=s.actual_duration_seconds,
        rpe_value_id=s.rpe_value_id,
        was_failure=s.was_failure,
        notes=s.notes,
    )


def _prescription_brief(p: WorkoutPrescription, unit: str) -> PrescriptionBrief:
    return PrescriptionBrief(
        id=p.id,
        sets=p.sets,
        reps=p.reps,
        hold_seconds=p.hold_seconds,
        target_weight=_weight(p.target_weight, unit),
        rpe_value_id=p.rpe_value_id,
        notes=p.notes,
    )


def build_exercise_response(se: SessionExercise, unit: str) -> SessionExerciseRead:
    unit = normalize_unit(unit)
    return SessionExerciseRead(
        id=se.id,
        session_block_id=se.session_block_id,
        exercise_id=se.exercise_id,
        exercise=_exercise_brief(se),
        exercise_order=se.exercise_order,
        prescription=_prescription_brief(se.prescription, unit) if se.prescription is not None else None,
        started_at=se.started_at,
        completed_at=se.completed_at,
        skipped=se.skipped,
        notes=se.notes,
        sets=[build_set_response(s, unit) for s in se.sets],
    )


def build_block_response(block: SessionBlock, unit: str) -> BlockRead:
    """Group metadata comes from the first exercise backed by a prescription."""
    unit = normalize_unit(unit)
    source = next((se.prescription for se in block.exercises if se.prescription is not None), None)
    return BlockRead(
        id=block.id,
        session_id=block.session_id,
        group_id=block.group_id,
        block_order=block.block_order,
        type=source.type if source else None,
        group_name=source.group_name if source else None,
        group_rounds=source.group_rounds if source else None,
        rest_between_sets=source.rest_between_sets if source else None,
        group_notes=source.group_notes if source else None,
        started_at=block.started_at,
        completed_at=block.completed_at,
        skipped=block.skipped,
        perceived_exertion=block.perceived_exertion,
        exercises=[build_exercise_response(se, unit) for se in block.exercises],
    )


def _duration_minutes(sess: WorkoutSession) -> int | None:
    if sess.started_at is None or sess.ended_at is None:
        return None
    delta = ensure_utc(sess.ended_at) - ensure_utc(sess.started_at)
    return int(delta.total_seconds() // 60)


def build_session_response(sess: WorkoutSession, preferred_unit: str | None) -> SessionDetail:
    unit = normalize_unit(preferred_unit)
    return SessionDetail(
        id=sess.id,
        user_id=sess.user_id,
        created_by_id=sess.created_by_id,
        created_by_name=sess.created_by.name if sess.created_by is not None else None,
        workout_id=sess.workout_id,
        workout_title=sess.workout.title if sess.workout is not None else None,
        started_at=sess.started_at,
        ended_at=sess.ended_at,
        duration_seconds=sess.duration_seconds,
        duration_minutes=_duration_minutes(sess),
        perceived_intensity=sess.perceived_intensity,
        completed=sess.completed,
        notes=sess.notes,
        weight_unit=unit,
        blocks=[build_block_response(b, unit) for b in sess.blocks],
    )


def build_session_list_item(sess: WorkoutSession) -> SessionListItem:
    return SessionListItem(
        id=sess.id,
        user_id=sess.user_id,
        workout_id=sess.workout_id,
        workout_title=sess.workout.title if sess.workout is not None else None,
        started_at=sess.started_at,
        ended_at=sess.ended_at,
        duration_seconds=sess.duration_seconds,
        completed=sess.completed,
        total_blocks=len(sess.blocks),
        completed_blocks=sum(1 for b in sess.blocks if b.is_done),
    )


def _prescription_row(p: WorkoutPrescription, unit: str) -> PrescriptionExerciseRead:
    return PrescriptionExerciseRead(
        id=p.id,
        exercise_id=p.exercise_id,
        exercise=_exercise_brief(p),
        exercise_order=p.exercise_order,
        sets=p.sets,
        reps=p.reps,
        hold_seconds=p.hold_seconds,
        target_weight=_weight(p.target_weight, unit),
        rpe_value_id=p.rpe_value_id,
        notes=p.notes,
        created_at=p.created_at,
    )


def build_group_response(group: PrescriptionGroup, unit: str | None) -> PrescriptionGroupRead:
    unit = normalize_unit(unit)
    return PrescriptionGroupRead(
        group_id=group.group_id,
        workout_id=group.workout_id,
        type=group.type,
        group_order=group.group_order,
        group_rounds=group.group_rounds,
        rest_between_sets=group.rest_between_sets,
        group_name=group.group_name,
        group_notes=group.group_notes,
        exercises=[_prescription_row(p, unit) for p in group.exercises],
    )


def build_group_responses(groups: Iterable[PrescriptionGroup], unit: str | None) -> list[PrescriptionGroupRead]:
    return [build_group_response(g, unit) for g in groups]
