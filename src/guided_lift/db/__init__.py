"""Database layer for guided-lift."""

from .engine import get_db_path, init_db, seed_exercises, seed_sample_workouts
from .repositories import (
    ExerciseRepository,
    PersonalRecordRepository,
    WorkoutLogRepository,
    WorkoutRepository,
)

__all__ = [
    "ExerciseRepository",
    "get_db_path",
    "init_db",
    "PersonalRecordRepository",
    "seed_exercises",
    "seed_sample_workouts",
    "WorkoutLogRepository",
    "WorkoutRepository",
]
