from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from fitflow.db import get_db
from fitflow.deps.auth import PRIVILEGED_ROLES, get_current_user, get_optional_user, require_role
from fitflow.models import User
from fitflow.repositories.user_repo import EmailAlreadyExists, UserRepository
from fitflow.schemas.user import PreferencesUpdate, UserCreate, UserRead, UserRole

router = APIRouter(prefix="/users", tags=["users"])

@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    caller: User | None = Depends(get_optional_user),
):
    # self sign-up gets the plain role; trainers and admins are granted by an admin
    if payload.role != UserRole.user and (caller is None or caller.role not in PRIVILEGED_ROLES):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only an admin can assign roles")
    repo = UserRepository(db)
    if repo.get_by_email(payload.email):
        raise HTTPException(status_code=400, detail="email already registered")
    try:
        user = repo.create(
            email=payload.email,
            name=payload.name,
            role=payload.role.value,
            preferred_weight_unit=payload.preferred_weight_unit,
        )
    except EmailAlreadyExists:
        raise HTTPException(status_code=400, detail="email already registered")
    return user

@router.get("", response_model=list[UserRead], dependencies=[Depends(require_role("admin"))])
def list_users(
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    return UserRepository(db).list(limit=limit, offset=offset).items

@router.get("/me", response_model=UserRead)
def me(current: User = Depends(get_current_user)):
    return current

@router.patch("/me/preferences", response_model=UserRead)
def update_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    return UserRepository(db).set_weight_unit(current.id, unit=payload.preferred_weight_unit)

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    # owner or admin
    if current.id != user_id and current.role not in PRIVILEGED_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")
    return UserRepository(db).get_or_raise(user_id)
