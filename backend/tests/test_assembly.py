from datetime import datetime, timedelta, timezone

from fitflow.assembly import build_session_list_item, build_session_response, build_group_responses
from fitflow.mirror import instantiate_from_workout
from fitflow.repositories.block_repo import BlockRepository
from fitflow.repositories.prescription_repo import ExerciseSpec, PrescriptionRepository
from fitflow.repositories.session_exercise_repo import SessionExerciseRepository
from fitflow.repositories.session_repo import SessionRepository
from fitflow.repositories.set_repo import SetRepository
from fitflow.weights import WeightField

T0 = datetime(2026, 2, 10, 7, 30, tzinfo=timezone.utc)

def test_free_form_session_projects_135_lb_to_kg(db, user, exercises):
    sessions = SessionRepository(db)
    sess = sessions.start(user.id, created_by_id=user.id)
    block = BlockRepository(db).create(sess.id)
    se = SessionExerciseRepository(db).create(block.id, exercise_id=exercises[0].id)
    SetRepository(db).create(se.id, actual_reps=5, actual_weight=WeightField.from_input(135, "lb"))

    detail = build_session_response(sessions.get_tree(sess.id), "kg")
    assert detail.workout_id is None and detail.weight_unit == "kg"
    (b,) = detail.blocks
    assert b.type is None and b.group_name is None
    (ex,) = b.exercises
    assert ex.prescription is None
    weight = ex.sets[0].actual_weight
    assert weight.unit == "kg"
    assert abs(weight.value - 61.23) < 0.005

    in_lb = build_session_response(sessions.get_tree(sess.id), "lbs")
    assert in_lb.blocks[0].exercises[0].sets[0].actual_weight.model_dump() == {"value": 134.99, "unit": "lb"}

def test_block_metadata_from_first_prescribed_exercise(db, user, workout, exercises):
    bench, plank, row = exercises
    group = PrescriptionRepository(db).create_group(
        workout.id, type="drop_set", group_order=1, group_rounds=3, rest_between_sets=60, group_name="Drops",
        exercises=[ExerciseSpec(bench.id, 1, sets=3, reps=10, target_weight=WeightField.from_input(100, "kg"))],
    )
    sessions = SessionRepository(db)
    sess = sessions.start(user.id, created_by_id=user.id, workout_id=workout.id)
    block = BlockRepository(db).create(sess.id)
    exercises_repo = SessionExerciseRepository(db)
    # ad hoc warm-up first, then the prescribed lift
    exercises_repo.create(block.id, exercise_id=row.id)
    exercises_repo.create(block.id, exercise_id=bench.id, prescription_id=group.exercises[0].id)

    detail = build_session_response(sessions.get_tree(sess.id), "lb")
    (b,) = detail.blocks
    assert (b.type, b.group_name, b.group_rounds, b.rest_between_sets) == ("drop_set", "Drops", 3, 60)
    adhoc, prescribed = b.exercises
    assert adhoc.prescription is None
    assert prescribed.prescription.reps == 10 and prescribed.prescription.sets == 3
    assert prescribed.prescription.target_weight.model_dump() == {"value": 220.46, "unit": "lb"}
    assert prescribed.sets == []

def test_mirrored_session_response(db, user, workout, exercises):
    PrescriptionRepository(db).create_group(
        workout.id, type="superset", group_order=1, group_name="A",
        exercises=[ExerciseSpec(exercises[0].id, 1, sets=2, reps=8), ExerciseSpec(exercises[1].id, 2, hold_seconds=30)],
    )
    sessions = SessionRepository(db)
    sess = sessions.start(user.id, created_by_id=user.id, workout_id=workout.id, commit=False)
    instantiate_from_workout(db, sess, workout.id)
    db.commit()

    detail = build_session_response(sessions.get_tree(sess.id), "kg")
    assert detail.workout_title == workout.title
    assert detail.created_by_name == user.name
    (b,) = detail.blocks
    assert b.type == "superset" and b.group_name == "A"
    assert [e.exercise.id for e in b.exercises] == [exercises[0].id, exercises[1].id]
    assert [len(e.sets) for e in b.exercises] == [2, 1]
    assert b.exercises[0].sets[0].actual_weight is None

def test_duration_minutes(db, user):
    sessions = SessionRepository(db)
    sess = sessions.start(user.id, created_by_id=user.id, started_at=T0)
    assert build_session_response(sessions.get_tree(sess.id), "kg").duration_minutes is None

    sessions.end(sess.id, ended_at=T0 + timedelta(minutes=45, seconds=30))
    detail = build_session_response(sessions.get_tree(sess.id), "kg")
    assert detail.duration_minutes == 45
    assert detail.duration_seconds == 45 * 60 + 30
    assert detail.completed is True

def test_list_item_counts_done_blocks(db, user):
    sessions = SessionRepository(db)
    sess = sessions.start(user.id, created_by_id=user.id)
    blocks = BlockRepository(db)
    done, skipped, _open = (blocks.create(sess.id) for _ in range(3))
    blocks.complete(done.id)
    blocks.skip(skipped.id)

    item = build_session_list_item(sessions.get_tree(sess.id))
    assert item.total_blocks == 3
    assert item.completed_blocks == 2

def test_group_responses_project_target_weight(db, workout, exercises):
    repo = PrescriptionRepository(db)
    repo.create_group(
        workout.id, type="straight", group_order=1,
        exercises=[ExerciseSpec(exercises[0].id, 1, reps=5, target_weight=WeightField.from_input(135, "lb"))],
    )
    repo.create_group(workout.id, type="warmup", group_order=2, exercises=[ExerciseSpec(exercises[1].id, 1, hold_seconds=60)])

    groups = build_group_responses(repo.list_groups(workout.id), "kg")
    assert [g.type for g in groups] == ["straight", "warmup"]
    assert groups[0].exercises[0].target_weight.model_dump() == {"value": 61.23, "unit": "kg"}
    assert groups[1].exercises[0].target_weight is None
    assert groups[0].exercises[0].exercise.id == exercises[0].id
