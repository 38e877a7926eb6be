"""Exception hierarchy for guided-lift."""


class GuidedLiftError(Exception):
    """Base exception for all guided-lift errors."""


class WorkoutLoadError(GuidedLiftError):
    """A workout definition could not be loaded for a session."""

    def __init__(self, message: str, workout_id: int | None = None) -> None:
        super().__init__(message)
        self.workout_id = workout_id


class WorkoutNotFoundError(WorkoutLoadError):
    """No workout exists with the requested ID."""

    def __init__(self, workout_id: int) -> None:
        super().__init__(f"Workout {workout_id} not found", workout_id=workout_id)


class InvalidWorkoutError(WorkoutLoadError):
    """The workout exists but cannot be run (no exercises, zero sets, ...)."""


class SessionStateError(GuidedLiftError):
    """An action was invoked in a session status that does not accept it."""

    def __init__(self, action: str, status: str) -> None:
        super().__init__(f"Cannot {action} while session is {status}")
        self.action = action
        self.status = status
