from decimal import Decimal

import pytest

from fitflow.errors import SessionExerciseNotFound, SetNotFound
from fitflow.repositories.block_repo import BlockRepository
from fitflow.repositories.session_exercise_repo import SessionExerciseRepository
from fitflow.repositories.session_repo import SessionRepository
from fitflow.repositories.set_repo import SetRepository
from fitflow.weights import WeightField

@pytest.fixture
def session_exercise(db, user, exercises):
    sess = SessionRepository(db).start(user.id, created_by_id=user.id)
    block = BlockRepository(db).create(sess.id)
    return SessionExerciseRepository(db).create(block.id, exercise_id=exercises[0].id)

def test_set_numbers_count_up(db, session_exercise):
    repo = SetRepository(db)
    numbers = [repo.create(session_exercise.id, actual_reps=5).set_number for _ in range(3)]
    assert numbers == [1, 2, 3]

def test_deleting_middle_set_renumbers(db, session_exercise):
    repo = SetRepository(db)
    first, middle, last = (repo.create(session_exercise.id, actual_reps=r) for r in (10, 8, 6))
    first_id, middle_id, last_id = first.id, middle.id, last.id

    repo.delete(middle_id)
    remaining = repo.list_by_exercise(session_exercise.id)
    assert [s.id for s in remaining] == [first_id, last_id]
    assert [s.set_number for s in remaining] == [1, 2]
    assert [s.actual_reps for s in remaining] == [10, 6]

def test_deleting_first_set_renumbers(db, session_exercise):
    repo = SetRepository(db)
    ids = [repo.create(session_exercise.id).id for _ in range(3)]
    repo.delete(ids[0])
    remaining = repo.list_by_exercise(session_exercise.id)
    assert [s.id for s in remaining] == ids[1:]
    assert [s.set_number for s in remaining] == [1, 2]

def test_set_weight_keeps_typed_value(db, session_exercise):
    s = SetRepository(db).create(session_exercise.id, actual_reps=5, actual_weight=WeightField.from_input(135, "lb"))
    assert s.actual_weight_kg == Decimal("61.23")
    assert s.original_actual_weight_value == Decimal("135")
    assert s.original_actual_weight_unit == "lb"

def test_partial_update_leaves_other_fields(db, session_exercise):
    repo = SetRepository(db)
    s = repo.create(session_exercise.id, actual_reps=5, actual_weight=WeightField.from_input(60, "kg"))
    s = repo.update(s.id, {"actual_reps": 8, "was_failure": True})
    assert s.actual_reps == 8 and s.was_failure is True
    assert s.actual_weight_kg == Decimal("60.00")

def test_null_weight_clears_it(db, session_exercise):
    repo = SetRepository(db)
    s = repo.create(session_exercise.id, actual_weight=WeightField.from_input(60, "kg"))
    s = repo.update(s.id, {"actual_weight": None})
    assert s.actual_weight is None
    assert s.original_actual_weight_value is None and s.original_actual_weight_unit is None

def test_complete_applies_changes_then_marks_done(db, session_exercise):
    repo = SetRepository(db)
    s = repo.create(session_exercise.id, actual_reps=5)
    assert s.completed is False
    s = repo.complete(s.id, {"actual_reps": 12, "notes": "last rep slow"})
    assert s.completed is True
    assert s.actual_reps == 12 and s.notes == "last rep slow"
    assert repo.complete(s.id).completed is True

def test_unknown_fields_are_ignored(db, session_exercise):
    repo = SetRepository(db)
    s = repo.create(session_exercise.id)
    s = repo.update(s.id, {"set_number": 42, "session_exercise_id": 0})
    assert s.set_number == 1 and s.session_exercise_id == session_exercise.id

def test_missing_rows(db):
    repo = SetRepository(db)
    with pytest.raises(SessionExerciseNotFound):
        repo.create(999999)
    with pytest.raises(SetNotFound):
        repo.update(999999, {"actual_reps": 1})
    with pytest.raises(SetNotFound):
        repo.delete(999999)
