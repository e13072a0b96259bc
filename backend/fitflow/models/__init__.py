from fitflow.models.user import User, UserRole
from fitflow.models.workout import Workout, Exercise
from fitflow.models.prescription import (
    WorkoutPrescription, PrescriptionType, PrescriptionGroup, PRESCRIPTION_TYPES, GROUP_FIELDS, group_prescriptions,
)
from fitflow.models.session import WorkoutSession, SessionBlock, SessionExercise, SessionSet

__all__ = [
    "User", "UserRole",
    "Workout", "Exercise",
    "WorkoutPrescription", "PrescriptionType", "PrescriptionGroup", "PRESCRIPTION_TYPES", "GROUP_FIELDS",
    "group_prescriptions",
    "WorkoutSession", "SessionBlock", "SessionExercise", "SessionSet",
]
