from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from fitflow.errors import EndBeforeStart, SessionNotFound, WorkoutNotFound
from fitflow.models import (
    SessionBlock,
    SessionExercise,
    Workout,
    WorkoutSession,
)
from fitflow.models.common import ensure_utc, utcnow
from fitflow.repositories.base import BaseRepository, Page

log = logging.getLogger(__name__)

# fields a caller may change after the session has started
UPDATABLE_FIELDS = ("notes", "perceived_intensity", "duration_seconds")

def _tree_options():
    exercises = selectinload(WorkoutSession.blocks).selectinload(SessionBlock.exercises)
    return (
        selectinload(WorkoutSession.workout),
        selectinload(WorkoutSession.created_by),
        exercises.selectinload(SessionExercise.prescription),
        exercises.selectinload(SessionExercise.exercise),
        exercises.selectinload(SessionExercise.sets),
    )

class SessionRepository(BaseRepository[WorkoutSession]):
    model = WorkoutSession
    not_found = SessionNotFound

    # READS (soft-deleted sessions are invisible)
    def get(self, session_id: int) -> Optional[WorkoutSession]:
        stmt = select(WorkoutSession).where(
            WorkoutSession.id == session_id, WorkoutSession.deleted_at.is_(None)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_tree(self, session_id: int) -> WorkoutSession:
        """Session with blocks, exercises, prescriptions and sets loaded for assembly."""
        stmt = (
            select(WorkoutSession)
            .where(WorkoutSession.id == session_id, WorkoutSession.deleted_at.is_(None))
            .options(*_tree_options())
        )
        sess = self.db.execute(stmt).scalar_one_or_none()
        if sess is None:
            raise SessionNotFound()
        return sess

    def list_by_user(
        self,
        user_id: int,
        *,
        created_by_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Page[WorkoutSession]:
        where = [WorkoutSession.user_id == user_id, WorkoutSession.deleted_at.is_(None)]
        if created_by_id is not None:
            where.append(WorkoutSession.created_by_id == created_by_id)
        stmt = (
            select(WorkoutSession)
            .where(*where)
            .options(selectinload(WorkoutSession.blocks), selectinload(WorkoutSession.workout))
            .order_by(WorkoutSession.started_at.desc(), WorkoutSession.id.desc())
        )
        items = self.db.execute(stmt.limit(limit).offset(offset)).scalars().all()
        total = self.db.execute(select(func.count()).select_from(WorkoutSession).where(*where)).scalar_one()
        return Page(items=list(items), total=total, limit=limit, offset=offset)

    # WRITES
    def start(
        self,
        user_id: int,
        *,
        created_by_id: int,
        workout_id: int | None = None,
        started_at: datetime | None = None,
        notes: str | None = None,
        commit: bool = True,
    ) -> WorkoutSession:
        """
        Open a session. Copying a workout's prescriptions into blocks is a
        separate step (see fitflow.mirror); pass commit=False to run both in
        one transaction.
        """
        if workout_id is not None and self.db.get(Workout, workout_id) is None:
            raise WorkoutNotFound()
        sess = WorkoutSession(
            user_id=user_id,
            created_by_id=created_by_id,
            workout_id=workout_id,
            started_at=started_at or utcnow(),
            notes=notes,
            completed=False,
        )
        self.add_and_refresh(sess)
        if commit:
            self.db.commit()
        log.info("session %s started for user %s by %s (workout=%s)", sess.id, user_id, created_by_id, workout_id)
        return sess

    def end(
        self,
        session_id: int,
        *,
        ended_at: datetime | None = None,
        notes: str | None = None,
        perceived_intensity: int | None = None,
    ) -> WorkoutSession:
        sess = self.get_or_raise(session_id)
        ended_at = ensure_utc(ended_at or utcnow())
        elapsed = ended_at - ensure_utc(sess.started_at)
        if elapsed.total_seconds() < 0:
            raise EndBeforeStart()
        sess.ended_at = ended_at
        sess.completed = True
        sess.duration_seconds = int(elapsed.total_seconds())
        if notes is not None:
            sess.notes = notes
        if perceived_intensity is not None:
            sess.perceived_intensity = perceived_intensity
        return self.commit_and_refresh(sess)

    def update(self, session_id: int, changes: dict[str, Any]) -> WorkoutSession:
        sess = self.get_or_raise(session_id)
        for name, value in changes.items():
            if name in UPDATABLE_FIELDS:
                setattr(sess, name, value)
        return self.commit_and_refresh(sess)

    def soft_delete(self, session_id: int) -> None:
        sess = self.get_or_raise(session_id)
        sess.deleted_at = utcnow()
        self.db.commit()
        log.info("session %s deleted", session_id)
