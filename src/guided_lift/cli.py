"""CLI entry point for guided-lift."""

import click

from . import __version__
from .commands import history, init, records, session, workouts
from .commands.base import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="guided-lift")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def main(verbose: bool):
    """guided-lift: guided strength workouts in the terminal.

    Walks you through a workout one set at a time, runs the rest timer
    between sets, cues you with sounds and voice, and celebrates new
    personal records.

    Example usage:

        # Initialize the project
        guided-lift init

        # Build a workout
        guided-lift workouts create "Push Day"
        guided-lift workouts add-exercise 4 "Bench Press" --sets 3 --reps 8 --rest 120

        # Run it
        guided-lift session run 4

        # Review progress
        guided-lift records
        guided-lift history
    """
    configure_logging(verbose)


main.add_command(init)
main.add_command(workouts)
main.add_command(session)
main.add_command(records)
main.add_command(history)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
