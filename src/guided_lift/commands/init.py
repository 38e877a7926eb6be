"""Initialize project command."""

import click

from ..db import get_db_path, init_db, seed_exercises, seed_sample_workouts
from .base import async_command, echo_info, echo_success, get_data_dir


@click.command()
@click.option("--no-samples", is_flag=True, help="Skip the sample workouts")
@async_command
async def init(no_samples: bool):
    """Initialize the guided-lift database.

    Creates the data directory and the SQLite schema, then seeds the
    exercise library and a few sample workouts.
    """
    data_dir = get_data_dir()
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing guided-lift in {data_dir}")
    data_dir.mkdir(parents=True, exist_ok=True)

    await init_db(db_path)
    echo_success("Database initialized")

    await seed_exercises(db_path)
    echo_success("Exercise library populated")

    if not no_samples:
        count = await seed_sample_workouts(db_path)
        if count:
            echo_success(f"Added {count} sample workout(s)")

    click.echo()
    click.echo("guided-lift is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  guided-lift workouts list          # See available workouts")
    click.echo('  guided-lift workouts create "Push Day"')
    click.echo("  guided-lift session run            # Start a guided session")
