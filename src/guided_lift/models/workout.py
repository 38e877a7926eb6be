"""Workout definition and set logging models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class WorkoutExercise:
    """One movement within a workout, as prescribed for a session.

    Carries the prescription (sets, target reps, rest) along with the
    lifter's history for the movement: the last weight used and the
    best weight on record.
    """

    id: int
    name: str
    muscle_group: str
    sets: int
    target_reps: int
    rest_time: int
    suggested_weight: float = 0.0
    current_pr: float | None = None
    equipment: str | None = None
    workout_exercise_id: int | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        if self.sets < 1:
            raise ValueError(f"Exercise '{self.name}' must have at least one set")
        if self.rest_time < 0:
            raise ValueError(f"Exercise '{self.name}' has a negative rest time")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "muscle_group": self.muscle_group,
            "equipment": self.equipment,
            "sets": self.sets,
            "target_reps": self.target_reps,
            "rest_time": self.rest_time,
            "suggested_weight": self.suggested_weight,
            "current_pr": self.current_pr,
            "workout_exercise_id": self.workout_exercise_id,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutExercise":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            muscle_group=data["muscle_group"],
            equipment=data.get("equipment"),
            sets=data["sets"],
            target_reps=data["target_reps"],
            rest_time=data["rest_time"],
            suggested_weight=data.get("suggested_weight", 0.0),
            current_pr=data.get("current_pr"),
            workout_exercise_id=data.get("workout_exercise_id"),
            notes=data.get("notes", ""),
        )


@dataclass(frozen=True)
class WorkoutDefinition:
    """An ordered list of exercises making up one session."""

    id: int
    name: str
    exercises: tuple[WorkoutExercise, ...]
    description: str = ""

    @property
    def total_exercises(self) -> int:
        return len(self.exercises)

    @property
    def total_sets(self) -> int:
        return sum(ex.sets for ex in self.exercises)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutDefinition":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            exercises=tuple(WorkoutExercise.from_dict(ex) for ex in data["exercises"]),
        )


@dataclass(frozen=True)
class SetInput:
    """What the lifter reports after performing a set."""

    weight: float
    reps: int
    rpe: float | None = None  # Rate of perceived exertion, 1-10

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError("Weight cannot be negative")
        if self.reps < 0:
            raise ValueError("Reps cannot be negative")
        if self.rpe is not None and not 1 <= self.rpe <= 10:
            raise ValueError("RPE must be between 1 and 10")


@dataclass(frozen=True)
class SetLog:
    """A completed set. Never modified once logged."""

    exercise_id: int
    set_number: int  # 1-based within the exercise
    weight: float
    reps: int
    rpe: float | None = None
    is_new_pr: bool = False
    completed_at: datetime = field(default_factory=datetime.now)

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exercise_id": self.exercise_id,
            "set_number": self.set_number,
            "weight": self.weight,
            "reps": self.reps,
            "rpe": self.rpe,
            "is_new_pr": self.is_new_pr,
            "completed_at": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SetLog":
        """Create from dictionary."""
        return cls(
            exercise_id=data["exercise_id"],
            set_number=data["set_number"],
            weight=data["weight"],
            reps=data["reps"],
            rpe=data.get("rpe"),
            is_new_pr=bool(data.get("is_new_pr", False)),
            completed_at=datetime.fromisoformat(data["completed_at"]),
        )


@dataclass
class WorkoutSlot:
    """An exercise prescription stored as part of a workout."""

    exercise_id: int
    sets: int
    target_reps: int
    rest_seconds: int | None = None  # None falls back to the default rest time
    exercise_name: str = ""
    muscle_group: str = ""
    equipment: str | None = None
    notes: str = ""
    id: int | None = None


@dataclass
class Workout:
    """A stored workout, as built in the library."""

    name: str
    slots: list[WorkoutSlot] = field(default_factory=list)
    description: str = ""
    created_at: datetime | None = None
    id: int | None = None

    @property
    def total_sets(self) -> int:
        return sum(slot.sets for slot in self.slots)
