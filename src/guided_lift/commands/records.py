"""Personal record and workout history commands."""

import click

from ..db import (
    ExerciseRepository,
    PersonalRecordRepository,
    WorkoutLogRepository,
    get_db_path,
)
from .base import (
    async_command,
    echo_info,
    ensure_initialized,
    format_duration,
    format_table,
    format_weight,
)


@click.command()
@click.pass_context
@async_command
async def records(ctx):
    """List personal records."""
    ensure_initialized(ctx)
    all_records = await PersonalRecordRepository(get_db_path()).list_all()

    if not all_records:
        echo_info("No personal records yet. Finish a guided session to set some.")
        return

    rows = [
        [
            record.exercise_name,
            format_weight(record.weight),
            str(record.reps),
            record.recorded_on.isoformat(),
        ]
        for record in all_records
    ]
    click.echo()
    click.echo(format_table(["Exercise", "Weight", "Reps", "Date"], rows))


@click.command()
@click.option("--limit", "-n", default=20, show_default=True, type=click.IntRange(min=1))
@click.option("--sets", "show_sets", is_flag=True, help="Show the sets of each session")
@click.pass_context
@async_command
async def history(ctx, limit: int, show_sets: bool):
    """List recent workout sessions."""
    ensure_initialized(ctx)
    repo = WorkoutLogRepository(get_db_path())
    logs = await repo.list_recent(limit)

    if not logs:
        echo_info("No sessions logged yet. Start one with 'guided-lift session run'")
        return

    rows = [
        [
            log.performed_on.isoformat(),
            log.workout_name or f"#{log.workout_id}",
            format_duration(log.duration),
            str(log.sets_completed),
            format_weight(log.total_volume),
            str(log.xp_earned),
        ]
        for log in logs
    ]
    click.echo()
    click.echo(format_table(["Date", "Workout", "Time", "Sets", "Volume", "XP"], rows))

    if not show_sets:
        return

    names = {e.id: e.name for e in await ExerciseRepository(get_db_path()).list_all()}
    for log in logs:
        click.echo()
        click.echo(f"{log.performed_on.isoformat()} {log.workout_name}:")
        for set_log in await repo.get_sets(log.id):
            marker = "  PR" if set_log.is_new_pr else ""
            click.echo(
                f"  {names.get(set_log.exercise_id, set_log.exercise_id)} set {set_log.set_number}: "
                f"{format_weight(set_log.weight)} x {set_log.reps}{marker}"
            )
