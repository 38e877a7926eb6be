"""Tests for the interactive session command."""

import asyncio
import importlib

import pytest
from click.testing import CliRunner

from guided_lift import config
from guided_lift.cli import main
from guided_lift.models.session import SessionStatus
from guided_lift.models.workout import SetInput

session_command = importlib.import_module("guided_lift.commands.session")

# Script entry for a prompt that stays open until it is cancelled
WAIT = object()


class ScriptedPrompts:
    """Stands in for questionary, answering prompts from a script.

    Running out of answers behaves like Ctrl-C (the prompt returns None).
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.asked = []
        self.waiting = asyncio.Event()
        self.select = self.confirm = self.text = self._question

    def _question(self, message, **kwargs):
        return ScriptedQuestion(self, message, kwargs)


class ScriptedQuestion:
    def __init__(self, prompts, message, kwargs):
        self.prompts = prompts
        self.message = message
        self.kwargs = kwargs

    async def ask_async(self):
        self.prompts.asked.append(self.message)
        if not self.prompts.answers:
            return None

        answer = self.prompts.answers.pop(0)
        if answer is WAIT:
            self.prompts.waiting.set()
            await asyncio.Event().wait()

        choices = self.kwargs.get("choices")
        if choices is not None:
            assert answer in choices, f"{answer!r} not offered for {self.message!r}"
        validate = self.kwargs.get("validate")
        if validate is not None:
            assert validate(answer) is True, f"{answer!r} rejected for {self.message!r}"
        return answer


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CliRunner with a database holding one two-set bench workout."""
    monkeypatch.setattr(config, "DATA_DIR", tmp_path / "data")
    runner = CliRunner()
    for args in (
        ["init", "--no-samples"],
        ["workouts", "create", "Test Day"],
        ["workouts", "add-exercise", "1", "Bench Press", "--sets", "2", "--reps", "5", "--rest", "30"],
    ):
        result = runner.invoke(main, args)
        assert result.exit_code == 0, result.output
    return runner


def run_session(runner, monkeypatch, *answers):
    prompts = ScriptedPrompts(*answers)
    monkeypatch.setattr(session_command, "questionary", prompts)
    result = runner.invoke(main, ["session", "run", "1", "--no-sound", "--allow-sleep"])
    return result, prompts


class TestSessionRun:
    """Tests for 'session run' driven by scripted answers."""

    def test_full_run_to_summary(self, runner, monkeypatch):
        """Test logging every set ends with the summary and a stored log."""
        result, prompts = run_session(
            runner,
            monkeypatch,
            True,                                # Start workout?
            "Log set", "60", "5", "",            # first set, a PR with no record
            True,                                # Keep going?
            "Skip rest",
            "Log set", "60", "5", "8",           # second set finishes the workout
        )

        assert result.exit_code == 0, result.output
        assert prompts.answers == []
        assert "Test Day: 1 exercises, 2 sets" in result.output
        assert "*** NEW PR: Bench Press ***" in result.output
        assert "Workout complete: Test Day" in result.output
        assert "Exercises:  1/1" in result.output
        assert "Sets:       2/2" in result.output
        assert "PR:         Bench Press 60 kg" in result.output

        history = runner.invoke(main, ["history"])
        assert "Test Day" in history.output
        records = runner.invoke(main, ["records"])
        assert "Bench Press" in records.output

    def test_decline_start(self, runner, monkeypatch):
        """Test saying no at the overview cancels without a summary."""
        result, _ = run_session(runner, monkeypatch, False)

        assert result.exit_code == 0, result.output
        assert "Session cancelled" in result.output
        assert "Workout complete" not in result.output

    def test_abort_after_a_set_keeps_the_work(self, runner, monkeypatch):
        """Test Ctrl-C mid-rest still finishes and summarises logged sets."""
        result, _ = run_session(
            runner, monkeypatch, True, "Log set", "60", "5", "", True
        )

        assert result.exit_code == 0, result.output
        assert "Sets:       1/2" in result.output
        assert "Test Day" in runner.invoke(main, ["history"]).output

    def test_abort_before_any_set(self, runner, monkeypatch):
        """Test Ctrl-C with nothing logged abandons the session."""
        result, _ = run_session(runner, monkeypatch, True)

        assert result.exit_code == 1
        assert "Session abandoned" in result.output
        assert "No sessions logged yet" in runner.invoke(main, ["history"]).output

    def test_pause_then_end(self, runner, monkeypatch):
        """Test ending from the pause menu."""
        result, prompts = run_session(
            runner, monkeypatch, True, "Pause", "End workout"
        )

        assert result.exit_code == 0, result.output
        assert prompts.asked[-1].startswith("Paused at")
        assert "Sets:       0/2" in result.output

    def test_unknown_workout_exits(self, runner, monkeypatch):
        """Test a workout that cannot be loaded fails after declining a retry."""
        prompts = ScriptedPrompts(False)
        monkeypatch.setattr(session_command, "questionary", prompts)
        result = runner.invoke(main, ["session", "run", "99", "--no-sound", "--allow-sleep"])

        assert result.exit_code == 1
        assert prompts.asked == ["Retry?"]


class TestRestPrompt:
    """Tests for the rest prompt racing the rest timer."""

    @pytest.mark.asyncio
    async def test_timer_ends_open_prompt(
        self, make_session, two_by_two_workout, monkeypatch, capsys
    ):
        """Test the rest prompt closes when the rest timer runs out."""
        prompts = ScriptedPrompts(WAIT)
        monkeypatch.setattr(session_command, "questionary", prompts)
        session = make_session(two_by_two_workout)
        assert await session.load()
        session.start_workout()
        session.complete_set(SetInput(weight=50, reps=8))
        assert session.status is SessionStatus.REST

        step = asyncio.create_task(session_command._rest_step(session))
        await asyncio.wait_for(prompts.waiting.wait(), timeout=1)
        session.rest_timer.skip()
        await asyncio.wait_for(step, timeout=1)

        assert session.status is SessionStatus.ACTIVE
        assert prompts.asked == ["During rest:"]
        assert "Rest over!" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_answer_before_timer(self, make_session, two_by_two_workout, monkeypatch):
        """Test an answer given during rest is applied."""
        prompts = ScriptedPrompts("Skip exercise")
        monkeypatch.setattr(session_command, "questionary", prompts)
        session = make_session(two_by_two_workout)
        assert await session.load()
        session.start_workout()
        session.complete_set(SetInput(weight=50, reps=8))

        await asyncio.wait_for(session_command._rest_step(session), timeout=1)

        assert session.status is SessionStatus.ACTIVE
        assert session.exercise_index == 1
