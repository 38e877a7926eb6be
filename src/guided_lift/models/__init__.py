"""Data models for guided-lift."""

from .exercises import EquipmentType, Exercise, MuscleGroup
from .records import NewPR, PersonalRecord, WorkoutLog, WorkoutSummary
from .session import SessionSettings, SessionStatus
from .workout import SetInput, SetLog, WorkoutDefinition, WorkoutExercise

__all__ = [
    "EquipmentType",
    "Exercise",
    "MuscleGroup",
    "NewPR",
    "PersonalRecord",
    "SessionSettings",
    "SessionStatus",
    "SetInput",
    "SetLog",
    "WorkoutDefinition",
    "WorkoutExercise",
    "WorkoutLog",
    "WorkoutSummary",
]
