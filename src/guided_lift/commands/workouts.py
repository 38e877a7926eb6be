"""Workout management commands."""

import click

from ..db import ExerciseRepository, WorkoutRepository, get_db_path
from ..models.exercises import Exercise, MuscleGroup
from ..models.workout import Workout, WorkoutSlot
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
)


@click.group()
@click.pass_context
def workouts(ctx):
    """Build and inspect workouts."""
    ensure_initialized(ctx)


@workouts.command(name="list")
@async_command
async def list_workouts():
    """List all workouts."""
    repo = WorkoutRepository(get_db_path())
    all_workouts = await repo.list_all()

    if not all_workouts:
        echo_info("No workouts found. Create one with 'guided-lift workouts create'")
        return

    rows = [
        [
            str(workout.id),
            workout.name[:30] + "..." if len(workout.name) > 30 else workout.name,
            str(len(workout.slots)),
            str(workout.total_sets),
        ]
        for workout in all_workouts
    ]

    click.echo()
    click.echo(format_table(["ID", "Name", "Exercises", "Sets"], rows))
    click.echo()
    click.echo(f"Total: {len(all_workouts)} workout(s)")


@workouts.command()
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def show(ctx, workout_id: int):
    """Show the exercises in a workout."""
    repo = WorkoutRepository(get_db_path())
    workout = await repo.get(workout_id)
    if workout is None:
        echo_error(f"Workout ID {workout_id} not found")
        ctx.exit(1)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Workout: {workout.name} (ID: {workout.id})")
    click.echo("=" * 60)
    if workout.description:
        click.echo(workout.description)
    click.echo()

    if not workout.slots:
        echo_info("No exercises yet. Add one with 'guided-lift workouts add-exercise'")
        return

    rows = [
        [
            str(position),
            slot.exercise_name,
            f"{slot.sets} x {slot.target_reps}",
            f"{slot.rest_seconds}s" if slot.rest_seconds else "default",
        ]
        for position, slot in enumerate(workout.slots, 1)
    ]
    click.echo(format_table(["#", "Exercise", "Sets x Reps", "Rest"], rows))


@workouts.command()
@click.argument("name")
@click.option("--description", "-d", default="", help="Short description")
@async_command
async def create(name: str, description: str):
    """Create an empty workout."""
    repo = WorkoutRepository(get_db_path())
    workout_id = await repo.create(Workout(name=name, description=description))
    echo_success(f"Created workout '{name}' (ID: {workout_id})")


@workouts.command(name="add-exercise")
@click.argument("workout_id", type=int)
@click.argument("exercise_name")
@click.option("--sets", "-s", default=3, show_default=True, type=click.IntRange(min=1))
@click.option("--reps", "-r", default=10, show_default=True, type=click.IntRange(min=1))
@click.option("--rest", type=click.IntRange(min=0), help="Rest seconds (default: session setting)")
@click.option(
    "--muscle-group",
    type=click.Choice([m.value for m in MuscleGroup]),
    help="Add the exercise to the library with this muscle group if it is missing",
)
@click.pass_context
@async_command
async def add_exercise(
    ctx,
    workout_id: int,
    exercise_name: str,
    sets: int,
    reps: int,
    rest: int | None,
    muscle_group: str | None,
):
    """Append an exercise to a workout."""
    db_path = get_db_path()
    workout_repo = WorkoutRepository(db_path)
    exercise_repo = ExerciseRepository(db_path)

    workout = await workout_repo.get(workout_id)
    if workout is None:
        echo_error(f"Workout ID {workout_id} not found")
        ctx.exit(1)

    exercise = await exercise_repo.get_by_name(exercise_name)
    if exercise is None:
        if muscle_group is None:
            echo_error(
                f"Exercise '{exercise_name}' not in the library. "
                "Pass --muscle-group to add it."
            )
            ctx.exit(1)
        exercise = Exercise(name=exercise_name, muscle_group=MuscleGroup(muscle_group))
        exercise.id = await exercise_repo.add(exercise)
        echo_info(f"Added '{exercise_name}' to the exercise library")

    await workout_repo.add_exercise(
        workout_id,
        WorkoutSlot(
            exercise_id=exercise.id,
            sets=sets,
            target_reps=reps,
            rest_seconds=rest,
        ),
    )
    echo_success(f"Added {exercise.name} ({sets} x {reps}) to '{workout.name}'")


@workouts.command()
@click.argument("workout_id", type=int)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, workout_id: int, force: bool):
    """Delete a workout."""
    repo = WorkoutRepository(get_db_path())
    workout = await repo.get(workout_id)
    if workout is None:
        echo_error(f"Workout ID {workout_id} not found")
        ctx.exit(1)

    if not force and not click.confirm(f"Delete workout '{workout.name}'?"):
        echo_info("Cancelled")
        return

    await repo.delete(workout_id)
    echo_success(f"Workout {workout_id} deleted")
