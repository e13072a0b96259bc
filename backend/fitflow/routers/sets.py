from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.orm import Session
from fitflow.assembly import build_set_response
from fitflow.db import get_db
from fitflow.deps.auth import ensure_session_access, get_current_user, get_weight_unit
from fitflow.models import SessionSet, User
from fitflow.repositories.session_exercise_repo import SessionExerciseRepository
from fitflow.repositories.set_repo import SetRepository
from fitflow.schemas.session import SetCreate, SetRead, SetUpdate

router = APIRouter(prefix="/sets", tags=["sets"])

def _accessible_set(db: Session, set_id: int, current: User) -> SessionSet:
    s = SetRepository(db).get_or_raise(set_id)
    ensure_session_access(s.session_exercise.block.session, current)
    return s

@router.post("", response_model=SetRead, status_code=status.HTTP_201_CREATED)
def add_set(
    payload: SetCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    se = SessionExerciseRepository(db).get_or_raise(payload.session_exercise_id)
    ensure_session_access(se.block.session, current)
    new_set = SetRepository(db).create(
        payload.session_exercise_id,
        actual_reps=payload.actual_reps,
        actual_weight=payload.actual_weight.to_field() if payload.actual_weight else None,
        actual_duration_seconds=payload.actual_duration_seconds,
        rpe_value_id=payload.rpe_value_id,
        notes=payload.notes,
    )
    return build_set_response(new_set, unit)

@router.get("/{set_id}", response_model=SetRead)
def get_set(
    set_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    return build_set_response(_accessible_set(db, set_id, current), unit)

@router.patch("/{set_id}", response_model=SetRead)
def update_set(
    set_id: int,
    payload: SetUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_set(db, set_id, current)
    return build_set_response(SetRepository(db).update(set_id, payload.changes()), unit)

@router.post("/{set_id}/complete", response_model=SetRead)
def complete_set(
    set_id: int,
    payload: SetUpdate | None = Body(None),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_set(db, set_id, current)
    changes = payload.changes() if payload is not None else None
    return build_set_response(SetRepository(db).complete(set_id, changes), unit)

@router.delete("/{set_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_set(set_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    _accessible_set(db, set_id, current)
    SetRepository(db).delete(set_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
