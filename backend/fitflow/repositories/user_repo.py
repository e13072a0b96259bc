# fitflow/repositories/user_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from fitflow.errors import UserNotFound
from fitflow.models import User
from fitflow.repositories.base import BaseRepository, Page
from fitflow.units import normalize_unit

class EmailAlreadyExists(Exception):
    pass

class UserRepository(BaseRepository[User]):
    model = User
    not_found = UserNotFound

    # READS
    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def list(self, *, limit: int = 50, offset: int = 0) -> Page[User]:
        stmt = select(User).order_by(User.id.asc())
        items = self.db.execute(stmt.limit(limit).offset(offset)).scalars().all()
        total = self.db.execute(select(func.count()).select_from(User)).scalar_one()
        return Page(items=list(items), total=total, limit=limit, offset=offset)

    # WRITES
    def create(self, *, email: str, name: str, role: str = "user", preferred_weight_unit: str = "kg") -> User:
        user = User(email=email, name=name, role=role, preferred_weight_unit=normalize_unit(preferred_weight_unit))
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise EmailAlreadyExists(email)

    def set_weight_unit(self, user_id: int, *, unit: str) -> User:
        user = self.get_or_raise(user_id)
        user.preferred_weight_unit = normalize_unit(unit)
        return self.commit_and_refresh(user)
