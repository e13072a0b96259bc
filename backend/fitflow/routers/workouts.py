import uuid
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from fitflow.assembly import build_group_response, build_group_responses
from fitflow.db import get_db
from fitflow.deps.auth import ensure_workout_access, get_current_user, get_weight_unit
from fitflow.models import User, Workout
from fitflow.repositories.prescription_repo import PrescriptionRepository
from fitflow.repositories.workout_repo import WorkoutRepository
from fitflow.schemas.prescription import (
    ExerciseAdd,
    GroupReorder,
    PrescriptionGroupCreate,
    PrescriptionGroupRead,
    PrescriptionGroupUpdate,
)
from fitflow.schemas.workout import WorkoutCreate, WorkoutRead

router = APIRouter(prefix="/workouts", tags=["workouts"])

def _owned_workout(db: Session, workout_id: int, current: User) -> Workout:
    workout = WorkoutRepository(db).get_or_raise(workout_id)
    ensure_workout_access(workout, current)
    return workout

# --- workouts ---

@router.post("", response_model=WorkoutRead, status_code=status.HTTP_201_CREATED)
def create_workout(payload: WorkoutCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return WorkoutRepository(db).create(current.id, title=payload.title, description=payload.description)

@router.get("", response_model=list[WorkoutRead])
def list_my_workouts(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    return WorkoutRepository(db).list_by_user(current.id, limit=limit, offset=offset).items

@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _owned_workout(db, workout_id, current)

@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    _owned_workout(db, workout_id, current)
    WorkoutRepository(db).delete(workout_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- prescription groups ---

@router.get("/{workout_id}/prescriptions", response_model=list[PrescriptionGroupRead])
def list_groups(
    workout_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _owned_workout(db, workout_id, current)
    return build_group_responses(PrescriptionRepository(db).list_groups(workout_id), unit)

@router.post("/{workout_id}/prescriptions", response_model=PrescriptionGroupRead,
             status_code=status.HTTP_201_CREATED)
def create_group(
    workout_id: int,
    payload: PrescriptionGroupCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _owned_workout(db, workout_id, current)
    group = PrescriptionRepository(db).create_group(
        workout_id,
        type=payload.type,
        group_order=payload.group_order,
        exercises=[e.to_spec() for e in payload.exercises],
        group_rounds=payload.group_rounds,
        rest_between_sets=payload.rest_between_sets,
        group_name=payload.group_name,
        group_notes=payload.group_notes,
    )
    return build_group_response(group, unit)

@router.put("/{workout_id}/prescriptions/order", response_model=list[PrescriptionGroupRead])
def reorder_groups(
    workout_id: int,
    payload: GroupReorder,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _owned_workout(db, workout_id, current)
    repo = PrescriptionRepository(db)
    repo.reorder_groups(workout_id, payload.group_ids)
    return build_group_responses(repo.list_groups(workout_id), unit)

@router.get("/{workout_id}/prescriptions/continuity")
def check_continuity(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    """409 with the list of problems when orders have gaps or duplicates."""
    _owned_workout(db, workout_id, current)
    PrescriptionRepository(db).validate_order_continuity(workout_id)
    return {"ok": True}

@router.delete("/{workout_id}/prescriptions/exercises/{prescription_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_exercise(
    workout_id: int,
    prescription_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    _owned_workout(db, workout_id, current)
    PrescriptionRepository(db).remove_exercise(prescription_id, workout_id=workout_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{workout_id}/prescriptions/{group_id}", response_model=PrescriptionGroupRead)
def get_group(
    workout_id: int,
    group_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _owned_workout(db, workout_id, current)
    return build_group_response(PrescriptionRepository(db).get_group(group_id, workout_id=workout_id), unit)

@router.patch("/{workout_id}/prescriptions/{group_id}", response_model=PrescriptionGroupRead)
def update_group(
    workout_id: int,
    group_id: uuid.UUID,
    payload: PrescriptionGroupUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _owned_workout(db, workout_id, current)
    changes = payload.model_dump(exclude_unset=True, exclude={"exercises"})
    exercises = [e.to_spec() for e in payload.exercises] if payload.exercises is not None else None
    group = PrescriptionRepository(db).update_group(workout_id, group_id, changes=changes, exercises=exercises)
    return build_group_response(group, unit)

@router.delete("/{workout_id}/prescriptions/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_group(
    workout_id: int,
    group_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    _owned_workout(db, workout_id, current)
    PrescriptionRepository(db).delete_group(workout_id, group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{workout_id}/prescriptions/{group_id}/exercises", response_model=PrescriptionGroupRead,
             status_code=status.HTTP_201_CREATED)
def add_exercise(
    workout_id: int,
    group_id: uuid.UUID,
    payload: ExerciseAdd,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _owned_workout(db, workout_id, current)
    repo = PrescriptionRepository(db)
    repo.add_exercise_to_group(group_id, payload.to_spec(), workout_id=workout_id)
    return build_group_response(repo.get_group(group_id, workout_id=workout_id), unit)
