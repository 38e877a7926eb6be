"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from guided_lift.db import init_db, seed_exercises
from guided_lift.models.session import SessionSettings
from guided_lift.models.workout import WorkoutDefinition, WorkoutExercise
from guided_lift.session import GuidedWorkoutSession, Notifier, ScreenWakeLock


class RecordingSound:
    is_supported = True

    def __init__(self):
        self.played = []

    def play(self, tones, volume):
        self.played.append((tones, volume))


class RecordingVibration:
    is_supported = True

    def __init__(self):
        self.patterns = []

    def vibrate(self, pattern):
        self.patterns.append(pattern)


class RecordingSpeech:
    is_supported = True

    def __init__(self):
        self.spoken = []

    def speak(self, text):
        self.spoken.append(text)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeLoader:
    """Loader returning a fixed workout, or raising queued errors first."""

    def __init__(self, workout, errors=None):
        self.workout = workout
        self.errors = list(errors or [])
        self.calls = 0

    async def load(self, workout_id):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.workout


class FakeRecordRepository:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []

    async def upsert(self, record):
        if self.fail:
            raise OSError("disk full")
        self.saved.append(record)


class FakeLogRepository:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved = []

    async def create(self, log):
        if self.fail:
            raise OSError("disk full")
        self.saved.append(log)
        return len(self.saved)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest_asyncio.fixture
async def db_path(temp_db_path):
    """Initialized database with the exercise library."""
    await init_db(temp_db_path)
    await seed_exercises(temp_db_path)
    return temp_db_path


@pytest.fixture
def two_by_two_workout():
    """Two exercises, two sets each, 30s rest, 100 kg records."""
    return WorkoutDefinition(
        id=1,
        name="Upper",
        exercises=(
            WorkoutExercise(
                id=10, name="Bench Press", muscle_group="chest",
                sets=2, target_reps=8, rest_time=30, current_pr=100.0,
            ),
            WorkoutExercise(
                id=20, name="Barbell Row", muscle_group="back",
                sets=2, target_reps=8, rest_time=30, current_pr=100.0,
            ),
        ),
    )


@pytest.fixture
def bench_pr_workout():
    """Single bench press exercise with an 80 kg record on file."""
    return WorkoutDefinition(
        id=2,
        name="Bench Day",
        exercises=(
            WorkoutExercise(
                id=10, name="Bench Press", muscle_group="chest",
                sets=3, target_reps=5, rest_time=90, current_pr=80.0,
            ),
        ),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sound():
    return RecordingSound()


@pytest.fixture
def speech():
    return RecordingSpeech()


@pytest.fixture
def vibration():
    return RecordingVibration()


@pytest_asyncio.fixture
async def make_session(clock, sound, vibration, speech):
    """Build a session around fake collaborators.

    Timers step only when tests call ``tick()`` themselves.
    """
    created = []

    def factory(workout, settings=None, loader=None, records=None, logs=None, **kwargs):
        settings = settings or SessionSettings(voice_enabled=True)
        wake_lock = kwargs.pop("wake_lock", None) or ScreenWakeLock()
        session = GuidedWorkoutSession(
            workout.id if workout else 99,
            loader=loader or FakeLoader(workout),
            records=records or FakeRecordRepository(),
            logs=logs or FakeLogRepository(),
            notifier=Notifier(settings, sound=sound, vibration=vibration, speech=speech),
            wake_lock=wake_lock,
            settings=settings,
            timer_interval=3600,
            clock=clock,
            **kwargs,
        )
        created.append(session)
        return session

    yield factory

    for session in created:
        await session.close()
