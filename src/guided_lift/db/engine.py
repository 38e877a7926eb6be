"""Database engine setup and initialization."""

import json
import logging
from pathlib import Path

import aiosqlite

from .. import config

logger = logging.getLogger(__name__)


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = config.DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "guided_lift.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # Exercise library
        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL,
                muscle_group TEXT NOT NULL,
                equipment TEXT,
                aliases TEXT DEFAULT '[]'
            )
        """)

        # Workout definitions
        await db.execute("""
            CREATE TABLE IF NOT EXISTS workouts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT DEFAULT '',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Ordered exercise prescriptions within a workout
        await db.execute("""
            CREATE TABLE IF NOT EXISTS workout_exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                workout_id INTEGER NOT NULL,
                exercise_id INTEGER NOT NULL,
                position INTEGER NOT NULL,
                sets INTEGER NOT NULL,
                target_reps INTEGER NOT NULL,
                rest_seconds INTEGER,
                notes TEXT DEFAULT '',
                FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id)
            )
        """)

        # Best weight per exercise
        await db.execute("""
            CREATE TABLE IF NOT EXISTS personal_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                exercise_id INTEGER NOT NULL UNIQUE,
                weight REAL NOT NULL,
                reps INTEGER NOT NULL,
                recorded_on DATE NOT NULL,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id)
            )
        """)

        # Finished sessions
        await db.execute("""
            CREATE TABLE IF NOT EXISTS workout_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                workout_id INTEGER NOT NULL,
                performed_on DATE NOT NULL,
                duration INTEGER NOT NULL,
                total_volume REAL NOT NULL,
                sets_completed INTEGER NOT NULL,
                exercises_completed INTEGER NOT NULL,
                xp_earned INTEGER DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (workout_id) REFERENCES workouts(id)
            )
        """)

        # Individual sets, used for last-weight suggestions
        await db.execute("""
            CREATE TABLE IF NOT EXISTS set_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                workout_log_id INTEGER NOT NULL,
                exercise_id INTEGER NOT NULL,
                set_number INTEGER NOT NULL,
                weight REAL NOT NULL,
                reps INTEGER NOT NULL,
                rpe REAL,
                is_new_pr INTEGER DEFAULT 0,
                completed_at TIMESTAMP NOT NULL,
                FOREIGN KEY (workout_log_id) REFERENCES workout_logs(id) ON DELETE CASCADE,
                FOREIGN KEY (exercise_id) REFERENCES exercises(id)
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_exercises_name
            ON exercises(name)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workout_exercises_workout
            ON workout_exercises(workout_id, position)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_set_logs_exercise
            ON set_logs(exercise_id, completed_at)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workout_logs_workout
            ON workout_logs(workout_id)
        """)

        await db.commit()


async def seed_exercises(db_path: Path | None = None) -> None:
    """Seed the database with common exercises."""
    from ..models.exercises import COMMON_EXERCISES

    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        for exercise in COMMON_EXERCISES:
            data = exercise.to_dict()
            await db.execute(
                """
                INSERT OR IGNORE INTO exercises
                (name, muscle_group, equipment, aliases)
                VALUES (?, ?, ?, ?)
                """,
                (
                    data["name"],
                    data["muscle_group"],
                    data["equipment"],
                    json.dumps(data["aliases"]),
                ),
            )

        await db.commit()


async def seed_sample_workouts(db_path: Path | None = None) -> int:
    """Seed the starter workouts, skipping any that already exist.

    Returns:
        Number of workouts created
    """
    from ..models.exercises import SAMPLE_WORKOUTS

    if db_path is None:
        db_path = get_db_path()

    created = 0
    async with aiosqlite.connect(db_path) as db:
        for workout_name, prescriptions in SAMPLE_WORKOUTS.items():
            cursor = await db.execute(
                "SELECT id FROM workouts WHERE name = ?", (workout_name,)
            )
            if await cursor.fetchone() is not None:
                continue

            cursor = await db.execute(
                "INSERT INTO workouts (name, description) VALUES (?, ?)",
                (workout_name, "Starter workout"),
            )
            workout_id = cursor.lastrowid

            for position, (exercise_name, sets, reps, rest) in enumerate(prescriptions):
                cursor = await db.execute(
                    "SELECT id FROM exercises WHERE name = ?", (exercise_name,)
                )
                row = await cursor.fetchone()
                if row is None:
                    logger.warning("Sample exercise %s missing from library", exercise_name)
                    continue
                await db.execute(
                    """
                    INSERT INTO workout_exercises
                    (workout_id, exercise_id, position, sets, target_reps, rest_seconds)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (workout_id, row[0], position, sets, reps, rest),
                )
            created += 1

        await db.commit()

    return created
