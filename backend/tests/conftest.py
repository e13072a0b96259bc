"""
Point the app at a throwaway SQLite file before anything imports
fitflow.settings, then create the schema once for the whole run.
"""
import os
import tempfile
import uuid

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="fitflow-tests-")
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"

from fitflow.db import Base, SessionLocal, engine  # noqa: E402
from fitflow import models  # noqa: E402,F401
from fitflow.repositories.user_repo import UserRepository  # noqa: E402
from fitflow.repositories.workout_repo import ExerciseRepository, WorkoutRepository  # noqa: E402

Base.metadata.create_all(bind=engine)


def unique_email():
    return f"u_{uuid.uuid4().hex[:10]}@example.com"


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return UserRepository(db).create(email=unique_email(), name="Tester")


@pytest.fixture
def workout(db, user):
    return WorkoutRepository(db).create(user.id, title="Upper body")


@pytest.fixture
def exercises(db):
    repo = ExerciseRepository(db)
    return [repo.create(name=f"{name} {uuid.uuid4().hex[:6]}") for name in ("Bench press", "Plank", "Row")]
