# fitflow/deps/auth.py
from fastapi import Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from fitflow.db import get_db
from fitflow.models import User, Workout, WorkoutSession
from fitflow.settings import get_settings
from fitflow.units import preferred_unit

# Roles that may act on other users' records
PRIVILEGED_ROLES = ("admin",)
# Roles that may start sessions on behalf of someone else
LOGGING_ROLES = ("trainer", "admin")

def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: int | None = Header(default=None, alias="X-User-ID"),
) -> User:
    """Identity is resolved upstream; the gateway forwards the user id."""
    unauth = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if x_user_id is None:
        raise unauth
    user = db.get(User, x_user_id)
    if not user:
        raise unauth
    return user

def get_optional_user(
    db: Session = Depends(get_db),
    x_user_id: int | None = Header(default=None, alias="X-User-ID"),
) -> User | None:
    if x_user_id is None:
        return None
    return get_current_user(db, x_user_id)

def get_weight_unit(
    unit: str | None = Query(None, description="kg or lb; defaults to the user's preference"),
    current: User = Depends(get_current_user),
) -> str:
    return preferred_unit(unit, current.preferred_weight_unit, get_settings().DEFAULT_WEIGHT_UNIT)

def require_role(*allowed_roles: str):
    """
    Usage: dependencies=[Depends(require_role("trainer","admin"))]
    """
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return current_user
    return dependency

def ensure_workout_access(workout: Workout, current: User) -> None:
    if workout.user_id != current.id and current.role not in PRIVILEGED_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed for this workout")

def ensure_session_access(sess: WorkoutSession, current: User) -> None:
    """Owner, the user who logged it, or an admin."""
    if sess.deleted_at is not None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workout session not found")
    if current.id in (sess.user_id, sess.created_by_id):
        return
    if current.role in PRIVILEGED_ROLES:
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed for this session")
