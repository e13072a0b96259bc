"""Domain errors raised by the repositories and mapped to HTTP codes in main.py."""
from __future__ import annotations


class FitflowError(Exception):
    detail = "error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


# --- validation (422) ---

class InvalidInput(FitflowError):
    field: str | None = None


class PrescriptionValidationError(InvalidInput):
    field = "prescription"


class InvalidType(PrescriptionValidationError):
    field = "type"
    detail = "invalid prescription type"


class InvalidOrder(PrescriptionValidationError):
    detail = "order must be at least 1"


class AmbiguousPrescription(PrescriptionValidationError):
    detail = "prescription must have exactly one of reps or hold_seconds"


class EmptyGroup(PrescriptionValidationError):
    field = "exercises"
    detail = "a prescription group needs at least one exercise"


class InvalidWeight(PrescriptionValidationError):
    field = "weight"
    detail = "weight cannot be negative"


class EndBeforeStart(InvalidInput):
    field = "ended_at"
    detail = "ended_at cannot be earlier than started_at"


# --- continuity (409) ---

class ContinuityError(FitflowError):
    detail = "order values must be continuous starting from 1"

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("; ".join(problems) or None)


# --- not found (404) ---

class NotFoundError(FitflowError):
    detail = "not found"


class UserNotFound(NotFoundError):
    detail = "User not found"


class WorkoutNotFound(NotFoundError):
    detail = "Workout not found"


class ExerciseNotFound(NotFoundError):
    detail = "Exercise not found"


class UnknownGroup(NotFoundError):
    detail = "Prescription group not found in this workout"


class PrescriptionNotFound(NotFoundError):
    detail = "Prescription not found"


class SessionNotFound(NotFoundError):
    detail = "Workout session not found"


class BlockNotFound(NotFoundError):
    detail = "Session block not found"


class SessionExerciseNotFound(NotFoundError):
    detail = "Session exercise not found"


class SetNotFound(NotFoundError):
    detail = "Session set not found"
