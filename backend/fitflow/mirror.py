"""
Instantiate a session's block/exercise/set tree from a workout's prescriptions.

This runs as its own step after SessionRepository.start(); free-form sessions
skip it and build their blocks by hand.
"""
from __future__ import annotations
import logging

from sqlalchemy.orm import Session

from fitflow.models import SessionBlock, SessionExercise, SessionSet, WorkoutSession, group_prescriptions
from fitflow.repositories.prescription_repo import PrescriptionRepository

log = logging.getLogger(__name__)


def instantiate_from_workout(db: Session, session: WorkoutSession, workout_id: int) -> list[SessionBlock]:
    """
    One block per prescription group (in group order), one session exercise
    per prescription row, and ``sets`` pre-filled session sets (1 when unset)
    carrying the target weight, reps or hold time, and RPE target.

    Rows are flushed, not committed.
    """
    rows = PrescriptionRepository(db).rows_for_workout(workout_id)
    blocks: list[SessionBlock] = []
    for block_order, group in enumerate(group_prescriptions(rows), start=1):
        block = SessionBlock(
            group_id=group.group_id,
            block_order=block_order,
            skipped=False,
        )
        for p in group.exercises:
            se = SessionExercise(
                prescription_id=p.id,
                exercise_id=p.exercise_id,
                exercise_order=p.exercise_order,
                skipped=False,
            )
            for set_number in range(1, (p.sets if p.sets and p.sets > 0 else 1) + 1):
                s = SessionSet(
                    set_number=set_number,
                    completed=False,
                    actual_reps=p.reps,
                    actual_duration_seconds=p.hold_seconds,
                    rpe_value_id=p.rpe_value_id,
                    was_failure=False,
                )
                s.actual_weight = p.target_weight
                se.sets.append(s)
            block.exercises.append(se)
        session.blocks.append(block)
        blocks.append(block)
    db.flush()
    log.info("session %s: mirrored %d groups from workout %s", session.id, len(blocks), workout_id)
    return blocks
