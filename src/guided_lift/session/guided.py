"""Guided workout session: exercise -> set -> rest -> ... -> complete.

The session owns every piece of live state. Public actions are plain
methods that return immediately; rest-timer expiry drives the remaining
transitions from the event loop. Writes to the data layer run as
detached tasks whose failures are only logged; in-memory state is
never rolled back.
"""

import asyncio
import logging
import time
from typing import Callable, Coroutine

from ..db.repositories import PersonalRecordRepository, WorkoutLogRepository
from ..exceptions import SessionStateError, WorkoutLoadError
from ..models.records import NewPR, PersonalRecord, WorkoutLog, WorkoutSummary
from ..models.session import (
    AdvanceExercise,
    AdvanceSet,
    FinishWorkout,
    PendingAdvance,
    SessionSettings,
    SessionStatus,
)
from ..models.workout import SetInput, SetLog, WorkoutDefinition, WorkoutExercise
from .loader import WorkoutLoader
from .notifier import Notifier
from .timer import CountdownTimer, SessionClock
from .wake_lock import ScreenWakeLock

logger = logging.getLogger(__name__)


class GuidedWorkoutSession:
    """Drives one guided workout from start to summary.

    Args:
        workout_id: Workout to run
        loader: Builds the workout definition and lifter history
        records: Where new personal records are upserted
        logs: Where the finished workout is stored
        notifier: Sound, vibration and voice cues
        wake_lock: Keeps the screen on while the session runs
        settings: Initial session settings
        on_complete: Called with the summary when the session completes
        timer_interval: Seconds per rest-timer and clock step
        clock: Monotonic time source for the session clock
    """

    def __init__(
        self,
        workout_id: int,
        loader: WorkoutLoader,
        records: PersonalRecordRepository,
        logs: WorkoutLogRepository,
        notifier: Notifier | None = None,
        wake_lock: ScreenWakeLock | None = None,
        settings: SessionSettings | None = None,
        on_complete: Callable[[WorkoutSummary], None] | None = None,
        timer_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.workout_id = workout_id
        self.loader = loader
        self.records = records
        self.logs = logs
        self.on_complete = on_complete

        self._settings = settings or SessionSettings()
        self.notifier = notifier or Notifier(self._settings)
        self.notifier.settings = self._settings
        self.wake_lock = wake_lock or ScreenWakeLock()
        self.rest_timer = CountdownTimer(
            on_complete=self._handle_rest_complete,
            on_tick=self._handle_rest_tick,
            interval=timer_interval,
            clock=clock,
        )
        self.clock = SessionClock(interval=timer_interval, clock=clock)

        self.status = SessionStatus.PREPARING
        self.workout: WorkoutDefinition | None = None
        self.load_error: WorkoutLoadError | None = None
        self.exercise_index = 0
        self.current_set_index = 0
        self.completed_sets_for_exercise: list[SetLog] = []
        self.all_completed_sets: list[SetLog] = []
        self.exercises_with_sets: set[int] = set()
        self.new_prs: list[NewPR] = []
        self.current_pr_celebration: NewPR | None = None
        self.summary: WorkoutSummary | None = None

        self._known_prs: dict[int, float] = {}
        self._pending: PendingAdvance | None = None
        self._background: set[asyncio.Task] = set()
        self._status_changed = asyncio.Event()

    # State views

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    @property
    def current_exercise(self) -> WorkoutExercise | None:
        if self.workout is None:
            return None
        return self.workout.exercises[self.exercise_index]

    @property
    def total_exercises(self) -> int:
        return self.workout.total_exercises if self.workout else 0

    @property
    def total_sets(self) -> int:
        """Sets prescribed for the current exercise."""
        exercise = self.current_exercise
        return exercise.sets if exercise else 0

    @property
    def elapsed_time(self) -> int:
        return self.clock.elapsed

    @property
    def rest_time_remaining(self) -> int:
        return self.rest_timer.time_remaining

    @property
    def is_rest_timer_active(self) -> bool:
        return self.rest_timer.is_running

    def best_weight(self, exercise_id: int) -> float:
        """Best weight known for an exercise, including this session's PRs."""
        return self._known_prs.get(exercise_id, 0.0)

    # Lifecycle

    async def load(self) -> bool:
        """Load the workout. Returns False (status FAILED) if it cannot be loaded."""
        if self.status not in (SessionStatus.PREPARING, SessionStatus.FAILED):
            raise SessionStateError("load the workout", self.status.value)

        self.load_error = None
        self._set_status(SessionStatus.PREPARING)
        try:
            workout = await self.loader.load(self.workout_id)
        except WorkoutLoadError as e:
            logger.warning("Failed to load workout %s: %s", self.workout_id, e)
            self.load_error = e
            self._set_status(SessionStatus.FAILED)
            return False

        self.workout = workout
        self._known_prs = {
            ex.id: ex.current_pr for ex in workout.exercises if ex.current_pr is not None
        }
        return True

    async def retry_load(self) -> bool:
        """Try loading again after a failure."""
        return await self.load()

    async def wait_for_status_change(self) -> SessionStatus:
        """Wait for the next status transition and return the new status."""
        await self._status_changed.wait()
        return self.status

    async def handle_visibility_change(self, visible: bool) -> None:
        """Tell the session the app went to the background or came back."""
        if visible:
            self.rest_timer.sync()
        if self._settings.keep_screen_on and self.status is not SessionStatus.COMPLETE:
            await self.wake_lock.handle_visibility_change(visible)

    async def flush(self) -> None:
        """Wait for pending background writes."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def close(self) -> None:
        """Stop both timers, finish pending writes and release the wake lock."""
        self.rest_timer.cancel()
        self.clock.stop()
        await self.flush()
        await self.wake_lock.close()

    async def __aenter__(self) -> "GuidedWorkoutSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Actions

    def start_workout(self) -> None:
        """Begin the first set of the first exercise."""
        self._require("start the workout", SessionStatus.PREPARING)
        if self.workout is None:
            raise SessionStateError("start the workout", "not loaded")

        self.clock.start()
        self._set_status(SessionStatus.ACTIVE)
        if self._settings.keep_screen_on:
            self._spawn(self.wake_lock.request())
        self.notifier.speak_text("Let's go!")
        self._announce_exercise()

    def complete_set(self, data: SetInput) -> SetLog:
        """Log a set for the current exercise and move the workout along."""
        self._require("complete a set", SessionStatus.ACTIVE, SessionStatus.REST)
        if self.status is SessionStatus.REST:
            self.rest_timer.cancel()

        exercise = self.current_exercise
        current_pr = self.best_weight(exercise.id)
        is_new_pr = data.weight > current_pr and data.reps >= 1

        set_log = SetLog(
            exercise_id=exercise.id,
            set_number=self.current_set_index + 1,
            weight=data.weight,
            reps=data.reps,
            rpe=data.rpe,
            is_new_pr=is_new_pr,
        )
        self.completed_sets_for_exercise.append(set_log)
        self.all_completed_sets.append(set_log)
        self.exercises_with_sets.add(self.exercise_index)

        self.notifier.play_set_complete()
        self.notifier.vibrate_short()

        plan = self._plan_advance()

        if is_new_pr:
            new_pr = NewPR(
                exercise_id=exercise.id,
                exercise_name=exercise.name,
                new_record=data.weight,
                previous_record=current_pr,
            )
            self.new_prs.append(new_pr)
            self.current_pr_celebration = new_pr
            self._known_prs[exercise.id] = data.weight
            self._pending = plan
            self._set_status(SessionStatus.PR)

            self.notifier.play_pr()
            self.notifier.vibrate_celebration()
            logger.info(
                "New PR on %s: %s (was %s)", exercise.name, data.weight, current_pr
            )
            self._spawn(
                self._save_personal_record(
                    PersonalRecord(
                        exercise_id=exercise.id,
                        exercise_name=exercise.name,
                        weight=data.weight,
                        reps=data.reps,
                    )
                )
            )
            return set_log

        if self._settings.announce_motivation and not isinstance(plan, FinishWorkout):
            self.notifier.speak_motivation()
        self._apply_advance(plan)
        return set_log

    def dismiss_pr_celebration(self) -> None:
        """Acknowledge the PR and carry on where the set left off."""
        self._require("dismiss the PR celebration", SessionStatus.PR)
        plan, self._pending = self._pending, None
        self.current_pr_celebration = None
        self._apply_advance(plan if plan is not None else self._plan_advance())

    def skip_rest(self) -> None:
        """End the rest period early."""
        if self.status is not SessionStatus.REST:
            return
        self.rest_timer.skip()

    def skip_exercise(self) -> None:
        """Abandon the current exercise and move to the next one."""
        self._require("skip the exercise", SessionStatus.ACTIVE, SessionStatus.REST)
        self.rest_timer.cancel()
        if self.exercise_index + 1 >= self.total_exercises:
            self._finish_workout()
            return
        self._move_to_exercise(self.exercise_index + 1)
        self._set_status(SessionStatus.ACTIVE)
        self._announce_exercise()

    def go_to_previous_exercise(self) -> None:
        """Go back to the previous exercise and restart it from set 1.

        Sets already logged stay in the session history.
        """
        self._require(
            "go to the previous exercise", SessionStatus.ACTIVE, SessionStatus.REST
        )
        if self.exercise_index == 0:
            return
        self.rest_timer.cancel()
        self._move_to_exercise(self.exercise_index - 1)
        self._set_status(SessionStatus.ACTIVE)
        self._announce_exercise()

    def pause(self) -> None:
        if self.status not in (SessionStatus.ACTIVE, SessionStatus.REST):
            return
        self.rest_timer.pause()
        self._set_status(SessionStatus.PAUSED)

    def resume(self) -> None:
        if self.status is not SessionStatus.PAUSED:
            return
        if self.rest_timer.time_remaining > 0:
            self._set_status(SessionStatus.REST)
            self.rest_timer.resume()
        else:
            self._set_status(SessionStatus.ACTIVE)

    def end_workout(self) -> None:
        """Finish now, summarising whatever has been logged."""
        if self.status is SessionStatus.COMPLETE:
            return
        if self.workout is None:
            raise SessionStateError("end the workout", self.status.value)
        self._finish_workout()

    def update_settings(self, **changes) -> SessionSettings:
        """Merge ``changes`` into the live settings."""
        self._settings = self._settings.merged(**changes)
        self.notifier.settings = self._settings

        if "keep_screen_on" in changes:
            if not self._settings.keep_screen_on:
                self._spawn(self.wake_lock.release())
            elif self.status not in (
                SessionStatus.PREPARING,
                SessionStatus.FAILED,
                SessionStatus.COMPLETE,
            ):
                self._spawn(self.wake_lock.request())
        return self._settings

    # Transitions

    def _plan_advance(self) -> PendingAdvance:
        exercise = self.current_exercise
        if self.current_set_index + 1 < exercise.sets:
            return AdvanceSet(rest_time=exercise.rest_time)
        if self.exercise_index + 1 >= self.total_exercises:
            return FinishWorkout()
        next_index = self.exercise_index + 1
        return AdvanceExercise(
            next_index=next_index,
            rest_time=self.workout.exercises[next_index].rest_time,
        )

    def _apply_advance(self, plan: PendingAdvance) -> None:
        if isinstance(plan, FinishWorkout):
            self._finish_workout()
        elif isinstance(plan, AdvanceExercise):
            self.notifier.play_exercise_complete()
            self._move_to_exercise(plan.next_index)
            self._set_status(SessionStatus.REST)
            self._announce_exercise()
            self.rest_timer.start(plan.rest_time)
        else:
            self.current_set_index += 1
            self._set_status(SessionStatus.REST)
            if self._settings.auto_start_timer:
                self.rest_timer.start(plan.rest_time)

    def _finish_workout(self) -> None:
        self.rest_timer.cancel()
        self.clock.stop()
        self._pending = None
        self.current_pr_celebration = None

        summary = WorkoutSummary.from_session(
            workout_id=self.workout.id,
            workout_name=self.workout.name,
            duration=self.clock.elapsed,
            total_exercises=self.workout.total_exercises,
            total_sets=self.workout.total_sets,
            sets=self.all_completed_sets,
            prs=self.new_prs,
            exercises_completed=len(self.exercises_with_sets),
        )
        self.summary = summary
        self._set_status(SessionStatus.COMPLETE)
        self._spawn(self.wake_lock.release())

        self.notifier.play_workout_complete()
        self.notifier.vibrate_celebration()
        self.notifier.speak_text("Workout complete! Excellent work!")
        logger.info(
            "Workout %s complete: %d sets, %.1f volume, %d XP",
            summary.workout_name,
            summary.sets_completed,
            summary.total_volume,
            summary.xp_earned,
        )

        if self.on_complete is not None:
            self.on_complete(summary)

        self._spawn(
            self._save_workout_log(WorkoutLog.from_summary(summary, self.all_completed_sets))
        )

    def _move_to_exercise(self, index: int) -> None:
        self.exercise_index = index
        self.current_set_index = 0
        self.completed_sets_for_exercise = []

    def _set_status(self, status: SessionStatus) -> None:
        if status is not self.status:
            logger.debug("Session %s: %s -> %s", self.workout_id, self.status.value, status.value)
        self.status = status

        if status.is_running:
            self.clock.resume()
        else:
            self.clock.pause()

        changed, self._status_changed = self._status_changed, asyncio.Event()
        changed.set()

    def _require(self, action: str, *allowed: SessionStatus) -> None:
        if self.status not in allowed:
            raise SessionStateError(action, self.status.value)

    def _announce_exercise(self) -> None:
        exercise = self.current_exercise
        if exercise is None or not self._settings.announce_exercise:
            return
        self.notifier.speak_text(
            f"{exercise.name}: {exercise.sets} sets of {exercise.target_reps}"
        )

    # Timer callbacks

    def _handle_rest_complete(self) -> None:
        self.notifier.vibrate_timer_complete()
        self.notifier.play_beep()
        if self.status is SessionStatus.REST:
            self._set_status(SessionStatus.ACTIVE)

    def _handle_rest_tick(self, remaining: int) -> None:
        if 0 < remaining <= self._settings.timer_warning_at:
            self.notifier.play_countdown()
            if self._settings.announce_countdown:
                self.notifier.speak_text(str(remaining))

    # Background work

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Background task failed: %s", error)

    async def _save_personal_record(self, record: PersonalRecord) -> None:
        try:
            await self.records.upsert(record)
        except Exception as e:
            logger.warning("Failed to save PR for %s: %s", record.exercise_name, e)

    async def _save_workout_log(self, log: WorkoutLog) -> None:
        try:
            log_id = await self.logs.create(log)
        except Exception as e:
            logger.warning("Failed to save workout log for workout %s: %s", log.workout_id, e)
            return
        logger.info("Saved workout log %s", log_id)
