from __future__ import annotations
import re

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from fitflow.errors import ExerciseNotFound, WorkoutNotFound
from fitflow.models import Exercise, Workout
from fitflow.repositories.base import BaseRepository, Page

class SlugAlreadyExists(Exception):
    pass

def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")

class WorkoutRepository(BaseRepository[Workout]):
    model = Workout
    not_found = WorkoutNotFound

    def list_by_user(self, user_id: int, *, limit: int = 50, offset: int = 0) -> Page[Workout]:
        where = Workout.user_id == user_id
        stmt = select(Workout).where(where).order_by(Workout.id.desc())
        items = self.db.execute(stmt.limit(limit).offset(offset)).scalars().all()
        total = self.db.execute(select(func.count()).select_from(Workout).where(where)).scalar_one()
        return Page(items=list(items), total=total, limit=limit, offset=offset)

    def create(self, user_id: int, *, title: str, description: str | None = None) -> Workout:
        workout = Workout(user_id=user_id, title=title, description=description)
        self.db.add(workout)
        return self.commit_and_refresh(workout)

    def delete(self, workout_id: int) -> None:
        """Prescriptions go with the workout; sessions keep their history."""
        workout = self.get_or_raise(workout_id)
        self.db.delete(workout)
        self.db.commit()

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise
    not_found = ExerciseNotFound

    def list(self, *, limit: int = 100, offset: int = 0) -> Page[Exercise]:
        stmt = select(Exercise).order_by(Exercise.name.asc(), Exercise.id.asc())
        items = self.db.execute(stmt.limit(limit).offset(offset)).scalars().all()
        total = self.db.execute(select(func.count()).select_from(Exercise)).scalar_one()
        return Page(items=list(items), total=total, limit=limit, offset=offset)

    def create(self, *, name: str, slug: str | None = None, description: str | None = None) -> Exercise:
        exercise = Exercise(name=name, slug=slug or slugify(name), description=description)
        try:
            self.db.add(exercise)
            return self.commit_and_refresh(exercise)
        except IntegrityError:
            self.db.rollback()
            raise SlugAlreadyExists(exercise.slug)
