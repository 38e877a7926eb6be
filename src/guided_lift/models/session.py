"""Guided session status, settings and pending continuations."""

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum


class SessionStatus(str, Enum):
    """Guided workout session status."""

    PREPARING = "preparing"
    FAILED = "failed"  # Workout could not be loaded
    ACTIVE = "active"
    REST = "rest"
    PR = "pr"
    PAUSED = "paused"
    COMPLETE = "complete"

    @property
    def is_running(self) -> bool:
        """Whether the session clock should be accumulating time."""
        return self in (SessionStatus.ACTIVE, SessionStatus.REST, SessionStatus.PR)

    def get_display(self) -> str:
        """Get a human-readable status string."""
        status_map = {
            SessionStatus.PREPARING: "Getting Ready",
            SessionStatus.FAILED: "Could Not Load",
            SessionStatus.ACTIVE: "Lifting",
            SessionStatus.REST: "Resting",
            SessionStatus.PR: "New Record!",
            SessionStatus.PAUSED: "Paused",
            SessionStatus.COMPLETE: "Complete",
        }
        return status_map.get(self, self.value)


@dataclass(frozen=True)
class SessionSettings:
    """User-configurable behaviour of a guided session."""

    # Timer
    default_rest_time: int = 60
    auto_start_timer: bool = True
    timer_warning_at: int = 5

    # Sound
    sound_enabled: bool = True
    volume: float = 0.7

    # Vibration
    vibration_enabled: bool = True

    # Voice
    voice_enabled: bool = False
    announce_exercise: bool = True
    announce_countdown: bool = True
    announce_motivation: bool = False

    # Screen
    keep_screen_on: bool = True

    def __post_init__(self) -> None:
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError("Volume must be between 0 and 1")
        if self.default_rest_time < 0:
            raise ValueError("Default rest time cannot be negative")
        if self.timer_warning_at < 0:
            raise ValueError("Timer warning threshold cannot be negative")

    def merged(self, **changes) -> "SessionSettings":
        """Return a copy with ``changes`` applied (shallow merge)."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


# Continuations chosen when a PR interrupts the normal flow.
# dismiss_pr_celebration() executes whichever one was stored.


@dataclass(frozen=True)
class AdvanceSet:
    """Rest, then do the next set of the same exercise."""

    rest_time: int


@dataclass(frozen=True)
class AdvanceExercise:
    """Rest, then move on to the next exercise."""

    next_index: int
    rest_time: int


@dataclass(frozen=True)
class FinishWorkout:
    """That was the last set of the last exercise."""


PendingAdvance = AdvanceSet | AdvanceExercise | FinishWorkout
