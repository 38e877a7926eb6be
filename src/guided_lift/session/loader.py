"""Builds the immutable workout definition a session runs on."""

import logging

import aiosqlite

from ..db.repositories import (
    PersonalRecordRepository,
    WorkoutLogRepository,
    WorkoutRepository,
)
from ..exceptions import InvalidWorkoutError, WorkoutLoadError, WorkoutNotFoundError
from ..models.workout import WorkoutDefinition, WorkoutExercise

logger = logging.getLogger(__name__)


class WorkoutLoader:
    """Loads a workout plus the lifter's PRs and last-used weights."""

    def __init__(
        self,
        workouts: WorkoutRepository,
        records: PersonalRecordRepository,
        logs: WorkoutLogRepository,
        default_rest_time: int = 60,
    ):
        self.workouts = workouts
        self.records = records
        self.logs = logs
        self.default_rest_time = default_rest_time

    async def load(self, workout_id: int) -> WorkoutDefinition:
        """Load a runnable workout definition.

        Raises:
            WorkoutNotFoundError: No workout with that ID
            InvalidWorkoutError: The workout has no exercises or bad prescriptions
            WorkoutLoadError: The data layer failed
        """
        try:
            workout = await self.workouts.get(workout_id)
            if workout is None:
                raise WorkoutNotFoundError(workout_id)
            if not workout.slots:
                raise InvalidWorkoutError(
                    f"Workout '{workout.name}' has no exercises", workout_id=workout_id
                )

            exercise_ids = [slot.exercise_id for slot in workout.slots]
            prs = await self.records.get_for_exercises(exercise_ids)
            last_weights = await self.logs.get_last_weights(exercise_ids)
        except aiosqlite.Error as e:
            raise WorkoutLoadError(
                f"Could not load workout {workout_id}: {e}", workout_id=workout_id
            ) from e

        try:
            exercises = tuple(
                WorkoutExercise(
                    id=slot.exercise_id,
                    workout_exercise_id=slot.id,
                    name=slot.exercise_name,
                    muscle_group=slot.muscle_group,
                    equipment=slot.equipment,
                    sets=slot.sets,
                    target_reps=slot.target_reps,
                    suggested_weight=last_weights.get(slot.exercise_id, 0.0),
                    current_pr=prs.get(slot.exercise_id),
                    rest_time=(
                        slot.rest_seconds
                        if slot.rest_seconds is not None
                        else self.default_rest_time
                    ),
                    notes=slot.notes,
                )
                for slot in workout.slots
            )
        except ValueError as e:
            raise InvalidWorkoutError(str(e), workout_id=workout_id) from e

        logger.info(
            "Loaded workout %s (%d exercises, %d PRs on record)",
            workout.name,
            len(exercises),
            len(prs),
        )
        return WorkoutDefinition(
            id=workout_id,
            name=workout.name,
            description=workout.description,
            exercises=exercises,
        )
