"""Live guided-session engine."""

from .guided import GuidedWorkoutSession
from .loader import WorkoutLoader
from .notifier import Notifier
from .timer import CountdownTimer, SessionClock
from .wake_lock import InhibitorWakeLockProvider, ScreenWakeLock

__all__ = [
    "CountdownTimer",
    "GuidedWorkoutSession",
    "InhibitorWakeLockProvider",
    "Notifier",
    "ScreenWakeLock",
    "SessionClock",
    "WorkoutLoader",
]
