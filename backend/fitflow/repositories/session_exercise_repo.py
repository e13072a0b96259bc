from __future__ import annotations
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from fitflow.errors import BlockNotFound, ExerciseNotFound, PrescriptionNotFound, SessionExerciseNotFound
from fitflow.models import Exercise, SessionBlock, SessionExercise, WorkoutPrescription
from fitflow.repositories.base import TrackedStateRepository

class SessionExerciseRepository(TrackedStateRepository[SessionExercise]):
    model = SessionExercise
    not_found = SessionExerciseNotFound

    def get_tree(self, session_exercise_id: int) -> SessionExercise:
        stmt = (
            select(SessionExercise)
            .where(SessionExercise.id == session_exercise_id)
            .options(
                selectinload(SessionExercise.block).selectinload(SessionBlock.session),
                selectinload(SessionExercise.prescription),
                selectinload(SessionExercise.exercise),
                selectinload(SessionExercise.sets),
            )
        )
        se = self.db.execute(stmt).scalar_one_or_none()
        if se is None:
            raise SessionExerciseNotFound()
        return se

    def _require_prescription_for(self, block: SessionBlock, prescription_id: int) -> WorkoutPrescription:
        # must come from the session's workout, and from the block's group when it has one
        prescription = self.db.get(WorkoutPrescription, prescription_id)
        if prescription is None or prescription.workout_id != block.session.workout_id:
            raise PrescriptionNotFound()
        if block.group_id is not None and prescription.group_id != block.group_id:
            raise PrescriptionNotFound()
        return prescription

    def create(
        self,
        block_id: int,
        *,
        exercise_id: int,
        prescription_id: Optional[int] = None,
        notes: str | None = None,
    ) -> SessionExercise:
        """Log an exercise in a block; without a prescription it is an ad hoc entry."""
        block = self.db.get(SessionBlock, block_id)
        if block is None:
            raise BlockNotFound()
        if self.db.get(Exercise, exercise_id) is None:
            raise ExerciseNotFound()
        if prescription_id is not None:
            self._require_prescription_for(block, prescription_id)
        count = self.db.execute(
            select(func.count()).select_from(SessionExercise).where(SessionExercise.session_block_id == block_id)
        ).scalar_one()
        se = SessionExercise(
            session_block_id=block_id,
            exercise_id=exercise_id,
            prescription_id=prescription_id,
            exercise_order=count + 1,
            skipped=False,
            notes=notes,
        )
        self.db.add(se)
        return self.commit_and_refresh(se)

    def update_notes(self, session_exercise_id: int, *, notes: str | None) -> SessionExercise:
        se = self.get_or_raise(session_exercise_id)
        se.notes = notes
        return self.commit_and_refresh(se)
