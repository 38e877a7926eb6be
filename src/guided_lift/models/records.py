"""Personal records, workout summaries and stored workout logs."""

from dataclasses import dataclass, field
from datetime import date, datetime

from .workout import SetLog

# XP rewards
WORKOUT_BASE_XP = 100
PR_XP = 50
SET_XP = 5


def calculate_xp(prs_achieved: int, sets_completed: int) -> int:
    """XP earned for a finished workout."""
    return WORKOUT_BASE_XP + PR_XP * prs_achieved + SET_XP * sets_completed


@dataclass(frozen=True)
class NewPR:
    """A personal record set during the current session."""

    exercise_id: int
    exercise_name: str
    new_record: float
    previous_record: float
    xp_earned: int = PR_XP

    @property
    def improvement(self) -> float:
        return self.new_record - self.previous_record

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise_name,
            "new_record": self.new_record,
            "previous_record": self.previous_record,
            "improvement": self.improvement,
            "xp_earned": self.xp_earned,
        }


@dataclass(frozen=True)
class WorkoutSummary:
    """The result of a finished session."""

    workout_id: int
    workout_name: str
    duration: int  # seconds
    exercises_completed: int
    total_exercises: int
    sets_completed: int
    total_sets: int
    total_volume: float
    total_reps: int
    prs_achieved: tuple[NewPR, ...]
    xp_earned: int
    completed_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_session(
        cls,
        workout_id: int,
        workout_name: str,
        duration: int,
        total_exercises: int,
        total_sets: int,
        sets: list[SetLog],
        prs: list[NewPR],
        exercises_completed: int | None = None,
    ) -> "WorkoutSummary":
        """Aggregate the sets and PRs logged during a session.

        ``exercises_completed`` counts workout slots with at least one set;
        without it, distinct exercises among ``sets`` are counted.
        """
        if exercises_completed is None:
            exercises_completed = len({s.exercise_id for s in sets})
        return cls(
            workout_id=workout_id,
            workout_name=workout_name,
            duration=duration,
            exercises_completed=exercises_completed,
            total_exercises=total_exercises,
            sets_completed=len(sets),
            total_sets=total_sets,
            total_volume=sum(s.volume for s in sets),
            total_reps=sum(s.reps for s in sets),
            prs_achieved=tuple(prs),
            xp_earned=calculate_xp(len(prs), len(sets)),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "workout_id": self.workout_id,
            "workout_name": self.workout_name,
            "duration": self.duration,
            "exercises_completed": self.exercises_completed,
            "total_exercises": self.total_exercises,
            "sets_completed": self.sets_completed,
            "total_sets": self.total_sets,
            "total_volume": self.total_volume,
            "total_reps": self.total_reps,
            "prs_achieved": [pr.to_dict() for pr in self.prs_achieved],
            "xp_earned": self.xp_earned,
            "completed_at": self.completed_at.isoformat(),
        }


@dataclass
class PersonalRecord:
    """Best weight on record for an exercise."""

    exercise_id: int
    weight: float
    reps: int
    recorded_on: date = field(default_factory=date.today)
    exercise_name: str = ""
    id: int | None = None


@dataclass
class WorkoutLog:
    """A finished session as stored in history."""

    workout_id: int
    duration: int
    total_volume: float
    sets_completed: int
    exercises_completed: int
    xp_earned: int = 0
    performed_on: date = field(default_factory=date.today)
    sets: list[SetLog] = field(default_factory=list)
    workout_name: str = ""
    id: int | None = None

    @classmethod
    def from_summary(cls, summary: WorkoutSummary, sets: list[SetLog]) -> "WorkoutLog":
        """Build the history record for a finished session."""
        return cls(
            workout_id=summary.workout_id,
            workout_name=summary.workout_name,
            duration=summary.duration,
            total_volume=summary.total_volume,
            sets_completed=summary.sets_completed,
            exercises_completed=summary.exercises_completed,
            xp_earned=summary.xp_earned,
            performed_on=summary.completed_at.date(),
            sets=list(sets),
        )
