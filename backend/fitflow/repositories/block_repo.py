from __future__ import annotations
import uuid
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from fitflow.errors import BlockNotFound, SessionNotFound, UnknownGroup
from fitflow.models import SessionBlock, SessionExercise, WorkoutPrescription, WorkoutSession
from fitflow.repositories.base import TrackedStateRepository

class BlockRepository(TrackedStateRepository[SessionBlock]):
    model = SessionBlock
    not_found = BlockNotFound

    def get_tree(self, block_id: int) -> SessionBlock:
        exercises = selectinload(SessionBlock.exercises)
        stmt = (
            select(SessionBlock)
            .where(SessionBlock.id == block_id)
            .options(
                selectinload(SessionBlock.session),
                exercises.selectinload(SessionExercise.prescription),
                exercises.selectinload(SessionExercise.exercise),
                exercises.selectinload(SessionExercise.sets),
            )
        )
        block = self.db.execute(stmt).scalar_one_or_none()
        if block is None:
            raise BlockNotFound()
        return block

    def list_by_session(self, session_id: int) -> list[SessionBlock]:
        stmt = select(SessionBlock).where(SessionBlock.session_id == session_id).order_by(SessionBlock.block_order.asc())
        return list(self.db.execute(stmt).scalars().all())

    def _group_in_workout(self, group_id: uuid.UUID, workout_id: int | None) -> bool:
        if workout_id is None:
            return False
        stmt = select(WorkoutPrescription.id).where(
            WorkoutPrescription.group_id == group_id,
            WorkoutPrescription.workout_id == workout_id,
        )
        return self.db.execute(stmt.limit(1)).first() is not None

    def create(self, session_id: int, *, group_id: Optional[uuid.UUID] = None) -> SessionBlock:
        """Append a block; free-form sessions pass no group."""
        sess = self.db.get(WorkoutSession, session_id)
        if sess is None or sess.deleted_at is not None:
            raise SessionNotFound()
        if group_id is not None and not self._group_in_workout(group_id, sess.workout_id):
            raise UnknownGroup()
        count = self.db.execute(
            select(func.count()).select_from(SessionBlock).where(SessionBlock.session_id == session_id)
        ).scalar_one()
        block = SessionBlock(session_id=session_id, group_id=group_id, block_order=count + 1, skipped=False)
        self.db.add(block)
        return self.commit_and_refresh(block)

    def update_exertion(self, block_id: int, *, perceived_exertion: int | None) -> SessionBlock:
        block = self.get_or_raise(block_id)
        block.perceived_exertion = perceived_exertion
        return self.commit_and_refresh(block)
