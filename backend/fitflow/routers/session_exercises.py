from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from fitflow.assembly import build_exercise_response
from fitflow.db import get_db
from fitflow.deps.auth import ensure_session_access, get_current_user, get_weight_unit
from fitflow.models import SessionExercise, User
from fitflow.repositories.block_repo import BlockRepository
from fitflow.repositories.session_exercise_repo import SessionExerciseRepository
from fitflow.schemas.session import ExerciseNotes, SessionExerciseCreate, SessionExerciseRead

router = APIRouter(prefix="/session-exercises", tags=["session-exercises"])

def _accessible_exercise(db: Session, session_exercise_id: int, current: User) -> SessionExercise:
    se = SessionExerciseRepository(db).get_tree(session_exercise_id)
    ensure_session_access(se.block.session, current)
    return se

@router.post("", response_model=SessionExerciseRead, status_code=status.HTTP_201_CREATED)
def add_exercise(
    payload: SessionExerciseCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    block = BlockRepository(db).get_or_raise(payload.session_block_id)
    ensure_session_access(block.session, current)
    se = SessionExerciseRepository(db).create(
        payload.session_block_id,
        exercise_id=payload.exercise_id,
        prescription_id=payload.prescription_id,
        notes=payload.notes,
    )
    return build_exercise_response(se, unit)

@router.get("/{session_exercise_id}", response_model=SessionExerciseRead)
def get_exercise(
    session_exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    return build_exercise_response(_accessible_exercise(db, session_exercise_id, current), unit)

@router.post("/{session_exercise_id}/start", response_model=SessionExerciseRead)
def start_exercise(
    session_exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_exercise(db, session_exercise_id, current)
    return build_exercise_response(SessionExerciseRepository(db).start(session_exercise_id), unit)

@router.post("/{session_exercise_id}/complete", response_model=SessionExerciseRead)
def complete_exercise(
    session_exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_exercise(db, session_exercise_id, current)
    return build_exercise_response(SessionExerciseRepository(db).complete(session_exercise_id), unit)

@router.post("/{session_exercise_id}/skip", response_model=SessionExerciseRead)
def skip_exercise(
    session_exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_exercise(db, session_exercise_id, current)
    return build_exercise_response(SessionExerciseRepository(db).skip(session_exercise_id), unit)

@router.patch("/{session_exercise_id}/notes", response_model=SessionExerciseRead)
def update_notes(
    session_exercise_id: int,
    payload: ExerciseNotes,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_exercise(db, session_exercise_id, current)
    se = SessionExerciseRepository(db).update_notes(session_exercise_id, notes=payload.notes)
    return build_exercise_response(se, unit)
