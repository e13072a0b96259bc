from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from fitflow.db import get_db
from fitflow.deps.auth import get_current_user, require_role
from fitflow.repositories.workout_repo import ExerciseRepository, SlugAlreadyExists
from fitflow.schemas.workout import ExerciseCreate, ExerciseRead

router = APIRouter(prefix="/exercises", tags=["exercises"])

@router.get("", response_model=list[ExerciseRead], dependencies=[Depends(get_current_user)])
def list_exercises(
    db: Session = Depends(get_db),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    return ExerciseRepository(db).list(limit=limit, offset=offset).items

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_role("trainer", "admin"))])
def create_exercise(payload: ExerciseCreate, db: Session = Depends(get_db)):
    try:
        return ExerciseRepository(db).create(name=payload.name, slug=payload.slug, description=payload.description)
    except SlugAlreadyExists:
        raise HTTPException(status_code=400, detail="exercise slug already exists")

@router.get("/{exercise_id}", response_model=ExerciseRead, dependencies=[Depends(get_current_user)])
def get_exercise(exercise_id: int, db: Session = Depends(get_db)):
    return ExerciseRepository(db).get_or_raise(exercise_id)
