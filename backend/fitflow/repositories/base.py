# fitflow/repositories/base.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from fitflow.errors import NotFoundError

T = TypeVar("T")  # SQLAlchemy model type

@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    limit: int
    offset: int

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 style."""
    model: type
    not_found: type[NotFoundError] = NotFoundError

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id) -> T | None:
        return self.db.get(self.model, entity_id)

    def get_or_raise(self, entity_id) -> T:
        entity = self.get(entity_id)
        if entity is None:
            raise self.not_found()
        return entity

    def add_and_refresh(self, entity: T) -> T:
        self.db.add(entity)
        self.db.flush()
        self.db.refresh(entity)
        return entity

    def commit_and_refresh(self, entity: T) -> T:
        self.db.commit()
        self.db.refresh(entity)
        return entity

class TrackedStateRepository(BaseRepository[T]):
    """complete/skip/start for models using TrackedStateMixin (blocks, exercises)."""

    def start(self, entity_id) -> T:
        entity = self.get_or_raise(entity_id)
        entity.start()
        return self.commit_and_refresh(entity)

    def complete(self, entity_id) -> T:
        entity = self.get_or_raise(entity_id)
        entity.complete()
        return self.commit_and_refresh(entity)

    def skip(self, entity_id) -> T:
        entity = self.get_or_raise(entity_id)
        entity.skip()
        return self.commit_and_refresh(entity)
