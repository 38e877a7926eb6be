"""CLI commands for guided-lift."""

from .init import init
from .records import history, records
from .session import session
from .workouts import workouts

__all__ = [
    "history",
    "init",
    "records",
    "session",
    "workouts",
]
