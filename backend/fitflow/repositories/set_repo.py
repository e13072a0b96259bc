from __future__ import annotations
import logging
from typing import Any, Optional

from sqlalchemy import select, func

from fitflow.errors import SessionExerciseNotFound, SetNotFound
from fitflow.models import SessionExercise, SessionSet
from fitflow.repositories.base import BaseRepository
from fitflow.weights import WeightField

log = logging.getLogger(__name__)

# fields accepted by partial updates; "actual_weight" takes a WeightField or None
SET_FIELDS = (
    "actual_reps",
    "actual_weight",
    "actual_duration_seconds",
    "rpe_value_id",
    "was_failure",
    "completed",
    "notes",
)

class SetRepository(BaseRepository[SessionSet]):
    model = SessionSet
    not_found = SetNotFound

    def list_by_exercise(self, session_exercise_id: int) -> list[SessionSet]:
        stmt = (
            select(SessionSet)
            .where(SessionSet.session_exercise_id == session_exercise_id)
            .order_by(SessionSet.set_number.asc(), SessionSet.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(
        self,
        session_exercise_id: int,
        *,
        actual_reps: int | None = None,
        actual_weight: Optional[WeightField] = None,
        actual_duration_seconds: int | None = None,
        rpe_value_id: int | None = None,
        notes: str | None = None,
    ) -> SessionSet:
        if self.db.get(SessionExercise, session_exercise_id) is None:
            raise SessionExerciseNotFound()
        count = self.db.execute(
            select(func.count()).select_from(SessionSet).where(SessionSet.session_exercise_id == session_exercise_id)
        ).scalar_one()
        s = SessionSet(
            session_exercise_id=session_exercise_id,
            set_number=count + 1,
            completed=False,
            actual_reps=actual_reps,
            actual_duration_seconds=actual_duration_seconds,
            rpe_value_id=rpe_value_id,
            was_failure=False,
            notes=notes,
        )
        s.actual_weight = actual_weight
        self.db.add(s)
        return self.commit_and_refresh(s)

    def _apply(self, s: SessionSet, changes: dict[str, Any]) -> None:
        # only keys present in `changes` are touched
        for name, value in changes.items():
            if name in SET_FIELDS:
                setattr(s, name, value)

    def update(self, set_id: int, changes: dict[str, Any]) -> SessionSet:
        s = self.get_or_raise(set_id)
        self._apply(s, changes)
        return self.commit_and_refresh(s)

    def complete(self, set_id: int, changes: dict[str, Any] | None = None) -> SessionSet:
        s = self.get_or_raise(set_id)
        self._apply(s, changes or {})
        s.completed = True
        return self.commit_and_refresh(s)

    def delete(self, set_id: int) -> None:
        """Remove a set and renumber its siblings 1..N in their current order."""
        s = self.get_or_raise(set_id)
        session_exercise_id = s.session_exercise_id
        self.db.delete(s)
        self.db.flush()
        remaining = self.list_by_exercise(session_exercise_id)
        for number, sibling in enumerate(remaining, start=1):
            sibling.set_number = number
        self.db.commit()
        log.info("deleted set %s; renumbered %d remaining sets of exercise %s",
                 set_id, len(remaining), session_exercise_id)
