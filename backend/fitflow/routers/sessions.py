from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from fitflow.assembly import build_session_list_item, build_session_response
from fitflow.db import get_db
from fitflow.deps.auth import (
    LOGGING_ROLES,
    PRIVILEGED_ROLES,
    ensure_session_access,
    get_current_user,
    get_weight_unit,
)
from fitflow.mirror import instantiate_from_workout
from fitflow.models import User, WorkoutSession
from fitflow.repositories.session_repo import SessionRepository
from fitflow.repositories.user_repo import UserRepository
from fitflow.repositories.workout_repo import WorkoutRepository
from fitflow.schemas.session import SessionDetail, SessionEnd, SessionPage, SessionStart, SessionUpdate

router = APIRouter(prefix="/sessions", tags=["sessions"])

def _accessible_session(db: Session, session_id: int, current: User) -> WorkoutSession:
    sess = SessionRepository(db).get_or_raise(session_id)
    ensure_session_access(sess, current)
    return sess

@router.post("", response_model=SessionDetail, status_code=status.HTTP_201_CREATED)
def start_session(
    payload: SessionStart,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    user_id = payload.user_id or current.id
    if user_id != current.id:
        # trainers log for their clients
        if current.role not in LOGGING_ROLES:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to log for another user")
        UserRepository(db).get_or_raise(user_id)

    if payload.workout_id is not None:
        workout = WorkoutRepository(db).get_or_raise(payload.workout_id)
        if workout.user_id not in (user_id, current.id) and current.role not in PRIVILEGED_ROLES:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed for this workout")

    repo = SessionRepository(db)
    sess = repo.start(
        user_id,
        created_by_id=current.id,
        workout_id=payload.workout_id,
        started_at=payload.started_at,
        notes=payload.notes,
        commit=False,
    )
    if payload.workout_id is not None:
        instantiate_from_workout(db, sess, payload.workout_id)
    db.commit()
    return build_session_response(repo.get_tree(sess.id), unit)

@router.get("", response_model=SessionPage)
def list_sessions(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    user_id: int | None = Query(None, description="another user's sessions; only those you logged unless admin"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    target = user_id or current.id
    created_by_id = None
    if target != current.id and current.role not in PRIVILEGED_ROLES:
        created_by_id = current.id
    page = SessionRepository(db).list_by_user(target, created_by_id=created_by_id, limit=limit, offset=offset)
    return SessionPage(
        items=[build_session_list_item(s) for s in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )

@router.get("/{session_id}", response_model=SessionDetail)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    sess = SessionRepository(db).get_tree(session_id)
    ensure_session_access(sess, current)
    return build_session_response(sess, unit)

@router.post("/{session_id}/end", response_model=SessionDetail)
def end_session(
    session_id: int,
    payload: SessionEnd,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_session(db, session_id, current)
    repo = SessionRepository(db)
    repo.end(
        session_id,
        ended_at=payload.ended_at,
        notes=payload.notes,
        perceived_intensity=payload.perceived_intensity,
    )
    return build_session_response(repo.get_tree(session_id), unit)

@router.patch("/{session_id}", response_model=SessionDetail)
def update_session(
    session_id: int,
    payload: SessionUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    unit: str = Depends(get_weight_unit),
):
    _accessible_session(db, session_id, current)
    repo = SessionRepository(db)
    repo.update(session_id, payload.model_dump(exclude_unset=True))
    return build_session_response(repo.get_tree(session_id), unit)

@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    _accessible_session(db, session_id, current)
    SessionRepository(db).soft_delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
