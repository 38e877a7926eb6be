"""Interactive guided session command."""

import asyncio
import signal

import click
import questionary
from questionary import Style

from .. import config
from ..db import (
    PersonalRecordRepository,
    WorkoutLogRepository,
    WorkoutRepository,
    get_db_path,
)
from ..models.records import WorkoutSummary
from ..models.session import SessionSettings, SessionStatus
from ..models.workout import SetInput
from ..session import (
    GuidedWorkoutSession,
    InhibitorWakeLockProvider,
    Notifier,
    ScreenWakeLock,
    WorkoutLoader,
)
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_duration,
    format_weight,
)

custom_style = Style(
    [
        ("qmark", "fg:#673ab7 bold"),
        ("question", "bold"),
        ("answer", "fg:#f44336 bold"),
        ("pointer", "fg:#673ab7 bold"),
        ("highlighted", "fg:#673ab7 bold"),
        ("instruction", ""),
        ("text", ""),
    ]
)

# Returned by a prompt that was interrupted by a status change
_STATUS_CHANGED = object()


@click.group()
@click.pass_context
def session(ctx):
    """Run guided workout sessions."""
    ensure_initialized(ctx)


@session.command()
@click.argument("workout_id", type=int, required=False)
@click.option("--rest", type=click.IntRange(min=0), help="Default rest seconds between sets")
@click.option("--no-auto-rest", is_flag=True, help="Don't start the rest timer automatically")
@click.option("--warning-at", default=5, show_default=True, type=click.IntRange(min=0),
              help="Countdown cues in the last N seconds of rest")
@click.option("--no-sound", is_flag=True, help="Disable sound cues")
@click.option("--voice", is_flag=True, help="Announce exercises and countdowns aloud")
@click.option("--volume", default=0.7, show_default=True, type=click.FloatRange(0.0, 1.0))
@click.option("--keep-screen-on/--allow-sleep", default=True, show_default=True,
              help="Hold a wake lock while the session runs")
@click.pass_context
@async_command
async def run(
    ctx,
    workout_id: int | None,
    rest: int | None,
    no_auto_rest: bool,
    warning_at: int,
    no_sound: bool,
    voice: bool,
    volume: float,
    keep_screen_on: bool,
):
    """Run a guided session for a workout.

    Without WORKOUT_ID, pick the workout from a list.
    """
    db_path = get_db_path()
    workout_repo = WorkoutRepository(db_path)

    if workout_id is None:
        workout_id = await _pick_workout(workout_repo)
        if workout_id is None:
            echo_info("No workout selected")
            return

    settings = SessionSettings(
        default_rest_time=rest if rest is not None else config.DEFAULT_REST_TIME,
        auto_start_timer=not no_auto_rest,
        timer_warning_at=warning_at,
        sound_enabled=not no_sound,
        voice_enabled=voice,
        volume=volume,
        keep_screen_on=keep_screen_on,
    )
    records = PersonalRecordRepository(db_path)
    logs = WorkoutLogRepository(db_path)
    guided = GuidedWorkoutSession(
        workout_id,
        loader=WorkoutLoader(workout_repo, records, logs, settings.default_rest_time),
        records=records,
        logs=logs,
        notifier=Notifier.for_terminal(settings),
        wake_lock=ScreenWakeLock(InhibitorWakeLockProvider()),
        settings=settings,
    )

    async with guided:
        if not await _load(guided):
            ctx.exit(1)

        _print_overview(guided)
        if not await _ask(questionary.confirm("Start workout?", default=True, style=custom_style)):
            echo_info("Session cancelled")
            return

        guided.start_workout()
        _watch_foreground(guided)
        if keep_screen_on and not guided.wake_lock.is_supported:
            echo_warning("Screen wake lock not available on this system")

        try:
            await _drive(guided)
        except click.Abort:
            if guided.all_completed_sets:
                guided.end_workout()
            else:
                echo_warning("Session abandoned")
                raise

    if guided.summary is not None:
        _print_summary(guided.summary)


def _watch_foreground(guided: GuidedWorkoutSession) -> None:
    """Re-acquire a lost wake lock when the shell resumes us (fg after Ctrl-Z)."""
    if not hasattr(signal, "SIGCONT"):
        return
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(
        signal.SIGCONT,
        lambda: loop.create_task(guided.handle_visibility_change(True)),
    )


async def _ask(question):
    """Ask a questionary question, aborting on Ctrl-C."""
    answer = await question.ask_async()
    if answer is None:
        raise click.Abort()
    return answer


async def _ask_until_status_change(guided: GuidedWorkoutSession, question):
    """Ask a question, giving up when the session changes status first."""
    prompt = asyncio.create_task(_ask(question))
    changed = asyncio.create_task(guided.wait_for_status_change())
    done, _ = await asyncio.wait({prompt, changed}, return_when=asyncio.FIRST_COMPLETED)

    if prompt in done:
        changed.cancel()
        return prompt.result()

    prompt.cancel()
    await asyncio.gather(prompt, return_exceptions=True)
    return _STATUS_CHANGED


async def _pick_workout(repo: WorkoutRepository) -> int | None:
    workouts = [w for w in await repo.list_all() if w.slots]
    if not workouts:
        echo_error("No workouts with exercises. Create one with 'guided-lift workouts create'")
        return None

    return await questionary.select(
        "Which workout?",
        choices=[
            questionary.Choice(f"{w.name} ({len(w.slots)} exercises, {w.total_sets} sets)", w.id)
            for w in workouts
        ],
        style=custom_style,
    ).ask_async()


async def _load(guided: GuidedWorkoutSession) -> bool:
    while not await guided.load():
        echo_error(str(guided.load_error))
        retry = await questionary.confirm("Retry?", default=False, style=custom_style).ask_async()
        if not retry:
            return False
    return True


async def _drive(guided: GuidedWorkoutSession) -> None:
    while guided.status is not SessionStatus.COMPLETE:
        if guided.status is SessionStatus.ACTIVE:
            await _active_step(guided)
        elif guided.status is SessionStatus.REST:
            await _rest_step(guided)
        elif guided.status is SessionStatus.PR:
            pr = guided.current_pr_celebration
            click.echo()
            click.echo(click.style(f"*** NEW PR: {pr.exercise_name} ***", fg="magenta", bold=True))
            click.echo(
                f"    {format_weight(pr.new_record)} "
                f"(previous {format_weight(pr.previous_record)}, +{pr.improvement:g})  "
                f"+{pr.xp_earned} XP"
            )
            await _ask(questionary.confirm("Keep going?", default=True, style=custom_style))
            guided.dismiss_pr_celebration()
        elif guided.status is SessionStatus.PAUSED:
            choice = await _ask(
                questionary.select(
                    f"{guided.status.get_display()} at {format_duration(guided.elapsed_time)}",
                    choices=["Resume", "End workout"],
                    style=custom_style,
                )
            )
            if choice == "Resume":
                guided.resume()
            else:
                guided.end_workout()


async def _active_step(guided: GuidedWorkoutSession) -> None:
    _print_current(guided)
    choice = await _ask(
        questionary.select(
            "Next:",
            choices=["Log set", "Skip exercise", "Previous exercise", "Pause", "End workout"],
            style=custom_style,
        )
    )
    if choice == "Log set":
        guided.complete_set(await _ask_set(guided))
    else:
        _apply_choice(guided, choice)


async def _rest_step(guided: GuidedWorkoutSession) -> None:
    exercise = guided.current_exercise
    if guided.is_rest_timer_active:
        click.echo(
            f"Rest {guided.rest_time_remaining}s. "
            f"Next: {exercise.name} set {guided.current_set_index + 1}/{guided.total_sets}"
        )
    else:
        click.echo(f"Resting. Next: {exercise.name} set {guided.current_set_index + 1}/{guided.total_sets}")

    choice = await _ask_until_status_change(
        guided,
        questionary.select(
            "During rest:",
            choices=["Skip rest", "Log set now", "Skip exercise", "Pause", "End workout"],
            style=custom_style,
        ),
    )
    if choice is _STATUS_CHANGED:
        if guided.status is SessionStatus.ACTIVE:
            click.echo(click.style("Rest over!", fg="green", bold=True))
        return

    if choice == "Skip rest":
        guided.skip_rest()
    elif choice == "Log set now":
        guided.complete_set(await _ask_set(guided))
    else:
        _apply_choice(guided, choice)


def _apply_choice(guided: GuidedWorkoutSession, choice: str) -> None:
    if choice == "Skip exercise":
        guided.skip_exercise()
    elif choice == "Previous exercise":
        if guided.exercise_index == 0:
            echo_info("Already at the first exercise")
        guided.go_to_previous_exercise()
    elif choice == "Pause":
        guided.pause()
    elif choice == "End workout":
        guided.end_workout()


async def _ask_set(guided: GuidedWorkoutSession) -> SetInput:
    exercise = guided.current_exercise
    previous = guided.completed_sets_for_exercise
    default_weight = previous[-1].weight if previous else exercise.suggested_weight

    weight = await _ask(
        questionary.text(
            f"Weight ({config.WEIGHT_UNIT}):",
            default=f"{default_weight:g}",
            validate=lambda v: _is_number(v, minimum=0) or "Enter a weight of 0 or more",
            style=custom_style,
        )
    )
    reps = await _ask(
        questionary.text(
            "Reps:",
            default=str(exercise.target_reps),
            validate=lambda v: (v.isdigit() and int(v) >= 0) or "Enter a whole number",
            style=custom_style,
        )
    )
    rpe = await _ask(
        questionary.text(
            "RPE (optional):",
            validate=lambda v: not v or _is_number(v, 1, 10) or "RPE is 1-10",
            style=custom_style,
        )
    )
    return SetInput(weight=float(weight), reps=int(reps), rpe=float(rpe) if rpe else None)


def _is_number(value: str, minimum: float | None = None, maximum: float | None = None) -> bool:
    try:
        number = float(value)
    except ValueError:
        return False
    if minimum is not None and number < minimum:
        return False
    return maximum is None or number <= maximum


def _print_overview(guided: GuidedWorkoutSession) -> None:
    workout = guided.workout
    click.echo()
    click.echo("=" * 60)
    click.echo(f"{workout.name}: {workout.total_exercises} exercises, {workout.total_sets} sets")
    click.echo("=" * 60)
    for position, exercise in enumerate(workout.exercises, 1):
        pr = f"  PR {format_weight(exercise.current_pr)}" if exercise.current_pr else ""
        click.echo(
            f"  {position}. {exercise.name}: {exercise.sets} x {exercise.target_reps}, "
            f"rest {exercise.rest_time}s{pr}"
        )
    click.echo()


def _print_current(guided: GuidedWorkoutSession) -> None:
    exercise = guided.current_exercise
    click.echo()
    click.echo(
        click.style(
            f"[{guided.exercise_index + 1}/{guided.total_exercises}] {exercise.name}",
            bold=True,
        )
        + f"  set {guided.current_set_index + 1}/{exercise.sets}"
        + f"  target {exercise.target_reps} reps"
        + f"  ({format_duration(guided.elapsed_time)})"
    )
    if exercise.suggested_weight:
        click.echo(f"  Last time: {format_weight(exercise.suggested_weight)}")
    best = guided.best_weight(exercise.id)
    if best:
        click.echo(f"  PR: {format_weight(best)}")
    for set_log in guided.completed_sets_for_exercise:
        click.echo(f"  Set {set_log.set_number}: {format_weight(set_log.weight)} x {set_log.reps}")


def _print_summary(summary: WorkoutSummary) -> None:
    click.echo()
    click.echo("=" * 60)
    echo_success(f"Workout complete: {summary.workout_name}")
    click.echo("=" * 60)
    click.echo(f"  Duration:   {format_duration(summary.duration)}")
    click.echo(f"  Exercises:  {summary.exercises_completed}/{summary.total_exercises}")
    click.echo(f"  Sets:       {summary.sets_completed}/{summary.total_sets}")
    click.echo(f"  Volume:     {format_weight(summary.total_volume)}")
    for pr in summary.prs_achieved:
        click.echo(f"  PR:         {pr.exercise_name} {format_weight(pr.new_record)}")
    click.echo(f"  XP earned:  {summary.xp_earned}")
