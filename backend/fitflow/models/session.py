import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Integer, ForeignKey, DateTime, Text, Boolean, Numeric, String, Uuid, CheckConstraint, func,
)
from fitflow.db import Base
from fitflow.models.common import TrackedStateMixin
from fitflow.weights import weight_property

class WorkoutSession(Base):
    __tablename__ = "workout_sessions"
    __table_args__ = (
        CheckConstraint("perceived_intensity BETWEEN 1 AND 10", name="ck_session_intensity"),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    # who logged it; a trainer may log for a client
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # null for free-form sessions
    workout_id: Mapped[int | None] = mapped_column(ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    perceived_intensity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    user = relationship("User", foreign_keys=[user_id])
    created_by = relationship("User", foreign_keys=[created_by_id])
    workout = relationship("Workout")
    blocks = relationship(
        "SessionBlock",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionBlock.block_order",
    )

class SessionBlock(TrackedStateMixin, Base):
    """Session-side mirror of one prescription group."""
    __tablename__ = "session_blocks"
    __table_args__ = (
        CheckConstraint("perceived_exertion BETWEEN 1 AND 10", name="ck_block_exertion"),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("workout_sessions.id", ondelete="CASCADE"), index=True)
    # back-reference into workout_prescriptions.group_id, not owned
    group_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    block_order: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    perceived_exertion: Mapped[int | None] = mapped_column(Integer, nullable=True)

    session = relationship("WorkoutSession", back_populates="blocks")
    exercises = relationship(
        "SessionExercise",
        back_populates="block",
        cascade="all, delete-orphan",
        order_by="SessionExercise.exercise_order",
    )

class SessionExercise(TrackedStateMixin, Base):
    __tablename__ = "session_exercises"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_block_id: Mapped[int] = mapped_column(ForeignKey("session_blocks.id", ondelete="CASCADE"), index=True)
    # null when logged ad hoc
    prescription_id: Mapped[int | None] = mapped_column(
        ForeignKey("workout_prescriptions.id", ondelete="SET NULL"), nullable=True, index=True
    )
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), index=True)
    exercise_order: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    block = relationship("SessionBlock", back_populates="exercises")
    prescription = relationship("WorkoutPrescription")
    exercise = relationship("Exercise")
    sets = relationship(
        "SessionSet",
        back_populates="session_exercise",
        cascade="all, delete-orphan",
        order_by="SessionSet.set_number",
    )

class SessionSet(Base):
    __tablename__ = "session_sets"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    session_exercise_id: Mapped[int] = mapped_column(
        ForeignKey("session_exercises.id", ondelete="CASCADE"), index=True
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    actual_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_weight_kg: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    original_actual_weight_value: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    original_actual_weight_unit: Mapped[str | None] = mapped_column(String(2), nullable=True)
    actual_duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rpe_value_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    was_failure: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    actual_weight = weight_property("actual_weight")

    session_exercise = relationship("SessionExercise", back_populates="sets")
