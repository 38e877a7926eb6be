"""Data access layer for guided-lift."""

import json
from datetime import date, datetime
from pathlib import Path

import aiosqlite

from ..models.exercises import EquipmentType, Exercise, MuscleGroup
from ..models.records import PersonalRecord, WorkoutLog
from ..models.workout import SetLog, Workout, WorkoutSlot
from .engine import get_db_path


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class ExerciseRepository:
    """Repository for the exercise library."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get(self, exercise_id: int) -> Exercise | None:
        """Get an exercise by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE id = ?", (exercise_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_exercise(row)

    async def get_by_name(self, name: str) -> Exercise | None:
        """Get an exercise by name or alias (case-insensitive)."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM exercises WHERE name = ? COLLATE NOCASE", (name,)
            )
            row = await cursor.fetchone()
            if row is not None:
                return self._row_to_exercise(row)

        lowered = name.strip().lower()
        for exercise in await self.list_all():
            if lowered in (alias.lower() for alias in exercise.aliases):
                return exercise
        return None

    async def list_all(self) -> list[Exercise]:
        """List all exercises."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM exercises ORDER BY name")
            rows = await cursor.fetchall()
            return [self._row_to_exercise(row) for row in rows]

    async def add(self, exercise: Exercise) -> int:
        """Add a new exercise."""
        data = exercise.to_dict()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO exercises (name, muscle_group, equipment, aliases)
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
            return cursor.lastrowid

    def _row_to_exercise(self, row: aiosqlite.Row) -> Exercise:
        """Convert a database row to an Exercise."""
        return Exercise(
            id=row["id"],
            name=row["name"],
            muscle_group=MuscleGroup(row["muscle_group"]),
            equipment=EquipmentType(row["equipment"]) if row["equipment"] else None,
            aliases=json.loads(row["aliases"]) if row["aliases"] else [],
        )


class WorkoutRepository:
    """Repository for workout definitions."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, workout: Workout) -> int:
        """Create a workout along with its exercise slots."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "INSERT INTO workouts (name, description) VALUES (?, ?)",
                (workout.name, workout.description),
            )
            workout_id = cursor.lastrowid
            for position, slot in enumerate(workout.slots):
                await self._insert_slot(db, workout_id, position, slot)
            await db.commit()
            return workout_id

    async def add_exercise(self, workout_id: int, slot: WorkoutSlot) -> int:
        """Append an exercise slot to the end of a workout."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT COALESCE(MAX(position) + 1, 0) FROM workout_exercises WHERE workout_id = ?",
                (workout_id,),
            )
            (position,) = await cursor.fetchone()
            slot_id = await self._insert_slot(db, workout_id, position, slot)
            await db.commit()
            return slot_id

    async def get(self, workout_id: int) -> Workout | None:
        """Get a workout and its ordered slots by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM workouts WHERE id = ?", (workout_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            slots = await self._get_slots(db, workout_id)
            return self._row_to_workout(row, slots)

    async def list_all(self) -> list[Workout]:
        """List all workouts with their slots."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM workouts ORDER BY id")
            rows = await cursor.fetchall()
            return [
                self._row_to_workout(row, await self._get_slots(db, row["id"]))
                for row in rows
            ]

    async def delete(self, workout_id: int) -> None:
        """Delete a workout and its slots."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "DELETE FROM workout_exercises WHERE workout_id = ?", (workout_id,)
            )
            await db.execute("DELETE FROM workouts WHERE id = ?", (workout_id,))
            await db.commit()

    async def _insert_slot(
        self, db: aiosqlite.Connection, workout_id: int, position: int, slot: WorkoutSlot
    ) -> int:
        cursor = await db.execute(
            """
            INSERT INTO workout_exercises
            (workout_id, exercise_id, position, sets, target_reps, rest_seconds, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                workout_id,
                slot.exercise_id,
                position,
                slot.sets,
                slot.target_reps,
                slot.rest_seconds,
                slot.notes,
            ),
        )
        return cursor.lastrowid

    async def _get_slots(self, db: aiosqlite.Connection, workout_id: int) -> list[WorkoutSlot]:
        cursor = await db.execute(
            """
            SELECT we.*, e.name AS exercise_name, e.muscle_group, e.equipment
            FROM workout_exercises we
            JOIN exercises e ON e.id = we.exercise_id
            WHERE we.workout_id = ?
            ORDER BY we.position
            """,
            (workout_id,),
        )
        rows = await cursor.fetchall()
        return [
            WorkoutSlot(
                id=row["id"],
                exercise_id=row["exercise_id"],
                exercise_name=row["exercise_name"],
                muscle_group=row["muscle_group"],
                equipment=row["equipment"],
                sets=row["sets"],
                target_reps=row["target_reps"],
                rest_seconds=row["rest_seconds"],
                notes=row["notes"] or "",
            )
            for row in rows
        ]

    def _row_to_workout(self, row: aiosqlite.Row, slots: list[WorkoutSlot]) -> Workout:
        """Convert a database row to a Workout."""
        return Workout(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            slots=slots,
            created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
        )


class PersonalRecordRepository:
    """Repository for personal records (one per exercise)."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get_for_exercises(self, exercise_ids: list[int]) -> dict[int, float]:
        """Get the record weight for each of the given exercises."""
        if not exercise_ids:
            return {}
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"""
                SELECT exercise_id, weight FROM personal_records
                WHERE exercise_id IN ({_placeholders(len(exercise_ids))})
                """,
                tuple(exercise_ids),
            )
            rows = await cursor.fetchall()
            return {exercise_id: weight for exercise_id, weight in rows}

    async def upsert(self, record: PersonalRecord) -> None:
        """Create or replace the record for an exercise."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO personal_records (exercise_id, weight, reps, recorded_on)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(exercise_id) DO UPDATE SET
                    weight = excluded.weight,
                    reps = excluded.reps,
                    recorded_on = excluded.recorded_on
                """,
                (
                    record.exercise_id,
                    record.weight,
                    record.reps,
                    record.recorded_on.isoformat(),
                ),
            )
            await db.commit()

    async def list_all(self) -> list[PersonalRecord]:
        """List all records with exercise names."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT pr.*, e.name AS exercise_name
                FROM personal_records pr
                JOIN exercises e ON e.id = pr.exercise_id
                ORDER BY e.name
                """
            )
            rows = await cursor.fetchall()
            return [
                PersonalRecord(
                    id=row["id"],
                    exercise_id=row["exercise_id"],
                    exercise_name=row["exercise_name"],
                    weight=row["weight"],
                    reps=row["reps"],
                    recorded_on=date.fromisoformat(row["recorded_on"]),
                )
                for row in rows
            ]


class WorkoutLogRepository:
    """Repository for finished sessions and their sets."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, log: WorkoutLog) -> int:
        """Store a workout log and its sets in one transaction."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO workout_logs
                (workout_id, performed_on, duration, total_volume,
                 sets_completed, exercises_completed, xp_earned)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    log.workout_id,
                    log.performed_on.isoformat(),
                    log.duration,
                    log.total_volume,
                    log.sets_completed,
                    log.exercises_completed,
                    log.xp_earned,
                ),
            )
            log_id = cursor.lastrowid
            await db.executemany(
                """
                INSERT INTO set_logs
                (workout_log_id, exercise_id, set_number, weight, reps, rpe,
                 is_new_pr, completed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        log_id,
                        s.exercise_id,
                        s.set_number,
                        s.weight,
                        s.reps,
                        s.rpe,
                        int(s.is_new_pr),
                        s.completed_at.isoformat(),
                    )
                    for s in log.sets
                ],
            )
            await db.commit()
            return log_id

    async def get_last_weights(
        self, exercise_ids: list[int], limit: int = 50
    ) -> dict[int, float]:
        """Most recent weight logged for each exercise.

        Only the latest ``limit`` sets across the given exercises are
        considered, so long-untrained exercises may be missing.
        """
        if not exercise_ids:
            return {}
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"""
                SELECT exercise_id, weight FROM set_logs
                WHERE exercise_id IN ({_placeholders(len(exercise_ids))})
                ORDER BY completed_at DESC, id DESC
                LIMIT ?
                """,
                (*exercise_ids, limit),
            )
            rows = await cursor.fetchall()

        last_weights: dict[int, float] = {}
        for exercise_id, weight in rows:
            last_weights.setdefault(exercise_id, weight)
        return last_weights

    async def list_recent(self, limit: int = 20) -> list[WorkoutLog]:
        """List the most recent workout logs (without their sets)."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT wl.*, COALESCE(w.name, '') AS workout_name
                FROM workout_logs wl
                LEFT JOIN workouts w ON w.id = wl.workout_id
                ORDER BY wl.performed_on DESC, wl.id DESC
                LIMIT ?
                """,
                (limit,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_log(row) for row in rows]

    async def get_sets(self, log_id: int) -> list[SetLog]:
        """Get the sets stored for a workout log."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM set_logs WHERE workout_log_id = ? ORDER BY id",
                (log_id,),
            )
            rows = await cursor.fetchall()
            return [
                SetLog(
                    exercise_id=row["exercise_id"],
                    set_number=row["set_number"],
                    weight=row["weight"],
                    reps=row["reps"],
                    rpe=row["rpe"],
                    is_new_pr=bool(row["is_new_pr"]),
                    completed_at=datetime.fromisoformat(row["completed_at"]),
                )
                for row in rows
            ]

    def _row_to_log(self, row: aiosqlite.Row) -> WorkoutLog:
        """Convert a database row to a WorkoutLog."""
        return WorkoutLog(
            id=row["id"],
            workout_id=row["workout_id"],
            workout_name=row["workout_name"],
            performed_on=date.fromisoformat(row["performed_on"]),
            duration=row["duration"],
            total_volume=row["total_volume"],
            sets_completed=row["sets_completed"],
            exercises_completed=row["exercises_completed"],
            xp_earned=row["xp_earned"],
        )
